#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Utility Module for the Static File Server
-----------------------------------------
Contains helper functions and classes used throughout the server:
- Logging setup (colored console output and rotating log files)
- MIME type detection
"""

import os
import logging
import mimetypes
from logging.handlers import RotatingFileHandler

import colorama
from colorama import Fore, Style

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

DEFAULT_MIME_TYPE = 'application/octet-stream'


class ColoredFormatter(logging.Formatter):
    """Custom formatter for colored log output."""

    FORMATS = {
        logging.DEBUG: Fore.CYAN + LOG_FORMAT + Style.RESET_ALL,
        logging.INFO: Fore.GREEN + LOG_FORMAT + Style.RESET_ALL,
        logging.WARNING: Fore.YELLOW + LOG_FORMAT + Style.RESET_ALL,
        logging.ERROR: Fore.RED + LOG_FORMAT + Style.RESET_ALL,
        logging.CRITICAL: Fore.RED + Style.BRIGHT + LOG_FORMAT + Style.RESET_ALL
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self.FORMATS[logging.INFO])
        formatter = logging.Formatter(log_fmt, datefmt=LOG_DATE_FORMAT)
        return formatter.format(record)


def setup_logging(log_level='INFO', log_file=None, max_size=10485760, backup_count=5, use_colored_logging=True):
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (default: INFO)
        log_file: Log file path (default: None, console only)
        max_size: Maximum log file size in bytes (default: 10MB)
        backup_count: Number of backup logs to keep (default: 5)
        use_colored_logging: Whether to use colored logging in console (default: True)

    Returns:
        logging.Logger: Root logger instance
    """
    log_level_value = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_value)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console logging still works when the log file cannot be opened
    log_file_error = None
    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_size,
                backupCount=backup_count
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            root_logger.addHandler(file_handler)
        except OSError as e:
            log_file_error = e

    console_handler = logging.StreamHandler()

    if use_colored_logging:
        colorama.just_fix_windows_console()
        console_handler.setFormatter(ColoredFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger.addHandler(console_handler)

    if log_file_error is not None:
        root_logger.error(f"Error setting up log file {log_file}: {log_file_error}")
    return root_logger


def get_mime_type(filepath):
    """
    Get the MIME type for a file.

    Falls back to ``application/octet-stream`` when the type cannot be
    guessed, so the Content-Type header is never left empty.

    Args:
        filepath: Path to the file

    Returns:
        str: MIME type
    """
    mime_type, _ = mimetypes.guess_type(filepath)

    if mime_type is None:
        ext = os.path.splitext(filepath)[1].lower()
        if ext == '.js':
            return 'text/javascript'
        elif ext == '.css':
            return 'text/css'
        elif ext == '.json':
            return 'application/json'
        elif ext == '.svg':
            return 'image/svg+xml'
        return DEFAULT_MIME_TYPE

    return mime_type


# Initialize mimetypes module
mimetypes.init()

# Add common MIME types that might be missing
mimetypes.add_type('text/javascript', '.js')
mimetypes.add_type('text/css', '.css')
mimetypes.add_type('image/x-icon', '.ico')
mimetypes.add_type('image/svg+xml', '.svg')
mimetypes.add_type('application/json', '.json')
