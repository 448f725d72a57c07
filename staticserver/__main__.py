#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Static File Server Entry Point
------------------------------
Command-line interface: ``python -m staticserver`` or ``staticserver``.
"""

import sys
import logging
import argparse

from .config import ServerConfig
from .registry import StaticRootError
from .server import WebServer
from .utils import setup_logging


def build_parser():
    parser = argparse.ArgumentParser(description='Concurrent static file HTTP server')

    # Basic server options
    parser.add_argument('-c', '--config', type=str, help='Path to configuration file')
    parser.add_argument('-H', '--host', type=str, help='Host address to bind to')
    parser.add_argument('-p', '--port', type=int, help='Port to listen on')
    parser.add_argument('-d', '--root-folder', type=str, help='Directory to serve files from')

    # Performance options
    parser.add_argument('--pool-size', type=int, help='Maximum number of concurrent handlers')
    parser.add_argument('--request-timeout', type=float, help='Per-connection timeout in seconds (0 disables)')
    parser.add_argument('--connection-queue', type=int, help='Listen backlog size')

    # Logging options
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level')
    parser.add_argument('--log-file', type=str, help='Path to log file')
    parser.add_argument('--no-color', action='store_true', help='Disable colored logging')

    return parser


def main(argv=None):
    """
    Main entry point for the server.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)

    # Convert arguments to dictionary, excluding None values and the config path
    config_args = {k: v for k, v in vars(args).items() if v is not None and k != 'config'}

    # Special handling for boolean flags
    if config_args.pop('no_color', False):
        config_args['colored_logging'] = False

    config = ServerConfig(args.config, **config_args)
    setup_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        max_size=config.log_max_size,
        backup_count=config.log_backup_count,
        use_colored_logging=config.colored_logging
    )
    logger = logging.getLogger('staticserver')

    try:
        server = WebServer(**config.get_all())
    except StaticRootError as e:
        logger.critical(f"Cannot start server: {e}")
        return 1

    server.install_signal_handlers()
    return 0 if server.listen() else 1


if __name__ == '__main__':
    sys.exit(main())
