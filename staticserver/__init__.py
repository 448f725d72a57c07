#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Static File Server
------------------
A small concurrent HTTP server that serves the files of a single folder.

Each connection carries one request line. Known paths are answered with the
file contents, unknown paths with a 404, and the connection is closed.
"""

__version__ = '1.0.0'

from .server import WebServer
from .config import ServerConfig
from .handler import RequestHandler, Outcome, ParsedRequest, parse_request_line
from .pool import WorkerPool
from .registry import PathRegistry, StaticRootError
from .utils import setup_logging

# Make these classes available at the package level
__all__ = [
    'WebServer', 'ServerConfig', 'RequestHandler', 'Outcome', 'ParsedRequest',
    'parse_request_line', 'WorkerPool', 'PathRegistry', 'StaticRootError',
    'setup_logging'
]
