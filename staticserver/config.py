#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Configuration Module for the Static File Server
-----------------------------------------------
Handles loading and managing server configuration from various sources:
- Default configuration
- Configuration file (JSON)
- Keyword overrides (usually coming from the command line)
"""

import os
import json
import logging


class ServerConfig:
    """
    Server configuration manager.

    Loads and provides access to server configuration settings from various sources,
    with the following precedence (highest to lowest):
    1. Keyword arguments
    2. Configuration file
    3. Default values
    """

    # Default configuration settings
    DEFAULT_CONFIG = {
        "root_folder": "public",
        "host": "0.0.0.0",
        "port": 9999,
        "pool_size": 64,
        "request_timeout": 30,
        "connection_queue": 50,
        "template_path": "/classic.html",
        "max_line_length": 8192,
        "log_level": "INFO",
        "log_file": None,
        "log_max_size": 10485760,  # 10 MB
        "log_backup_count": 5,
        "colored_logging": True
    }

    def __init__(self, config_file=None, **kwargs):
        """
        Initialize the configuration with values from file and kwargs.

        Args:
            config_file: Path to the configuration file
            **kwargs: Additional configuration parameters that override file values
        """
        self._config = self.DEFAULT_CONFIG.copy()
        self.logger = logging.getLogger('ServerConfig')

        if config_file:
            self.load_from_file(config_file)

        for key, value in kwargs.items():
            self.set(key, value)

    def load_from_file(self, config_path):
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            bool: True if loaded successfully, False otherwise
        """
        if not os.path.exists(config_path):
            self.logger.warning(f"Configuration file {config_path} not found. Using defaults.")
            return False

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error loading configuration from {config_path}: {e}")
            return False

        if not isinstance(file_config, dict):
            self.logger.error(f"Configuration file {config_path} must contain a JSON object")
            return False

        for key, value in file_config.items():
            self.set(key, value)
        self.logger.info(f"Loaded configuration from {config_path}")
        return True

    def get(self, key, default=None):
        """
        Get a configuration value.

        Args:
            key: Configuration key
            default: Default value if key is not found

        Returns:
            Value for the key or default if not found
        """
        return self._config.get(key, default)

    def set(self, key, value):
        """
        Set a configuration value.

        Args:
            key: Configuration key
            value: Value to set
        """
        if key not in self.DEFAULT_CONFIG:
            self.logger.warning(f"Unknown configuration option: {key}")
        self._config[key] = value

    def get_all(self):
        """
        Get all configuration values.

        Returns:
            dict: All configuration values
        """
        return self._config.copy()

    # Property accessors for common configuration values
    @property
    def root_folder(self):
        return self.get('root_folder')

    @property
    def host(self):
        return self.get('host')

    @property
    def port(self):
        return self.get('port')

    @property
    def pool_size(self):
        return self.get('pool_size')

    @property
    def request_timeout(self):
        # 0 and None both mean "no timeout"
        return self.get('request_timeout') or None

    @property
    def connection_queue(self):
        return self.get('connection_queue')

    @property
    def template_path(self):
        return self.get('template_path')

    @property
    def max_line_length(self):
        return self.get('max_line_length')

    @property
    def log_level(self):
        return self.get('log_level')

    @property
    def log_file(self):
        return self.get('log_file')

    @property
    def log_max_size(self):
        return self.get('log_max_size')

    @property
    def log_backup_count(self):
        return self.get('log_backup_count')

    @property
    def colored_logging(self):
        return self.get('colored_logging')
