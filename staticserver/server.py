#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Static File Server Main Module
------------------------------
Binds the listening socket and runs the accept loop, handing every accepted
connection to the worker pool.
"""

import socket
import threading
import time
import logging
import signal

from .config import ServerConfig
from .handler import RequestHandler
from .pool import WorkerPool
from .registry import PathRegistry

# How often the accept loop wakes up to check for a stop request
ACCEPT_POLL_INTERVAL = 0.5

# Pause after a failed accept to prevent CPU spinning on repeated errors
ACCEPT_ERROR_BACKOFF = 0.1


class WebServer:
    """
    Web server that accepts connections and dispatches each one to the
    worker pool without waiting for it to be handled.
    """

    def __init__(self, config_file=None, registry=None, **kwargs):
        """
        Initialize the web server.

        Args:
            config_file: Path to the configuration file
            registry: PathRegistry to serve; loaded from root_folder if omitted
            **kwargs: Additional configuration parameters that override config file

        Raises:
            StaticRootError: If the static root cannot be listed
        """
        self.config = ServerConfig(config_file, **kwargs)
        self.logger = logging.getLogger('WebServer')

        if registry is None:
            registry = PathRegistry.load(self.config.root_folder)
        self.registry = registry

        self.request_handler = RequestHandler(
            self.config.root_folder,
            self.registry,
            template_path=self.config.template_path,
            max_line_length=self.config.max_line_length
        )
        self.pool = WorkerPool(self.config.pool_size)

        self.server_socket = None
        self._port = None
        self.is_running = False
        self.ready = threading.Event()
        self._stop_requested = threading.Event()

    @property
    def port(self):
        """Port the server is bound to, or None before binding."""
        return self._port

    def install_signal_handlers(self):
        """Stop the accept loop on SIGINT or SIGTERM. Main thread only."""
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, sig, frame):
        """
        Handle termination signals gracefully.

        Args:
            sig: Signal number
            frame: Current stack frame
        """
        self.logger.info(f"Received signal {sig}, shutting down...")
        self.stop()

    def stop(self):
        """Ask the accept loop to exit. Safe to call from any thread."""
        self._stop_requested.set()

    def listen(self, port=None):
        """
        Bind the listening socket and run the accept loop until stopped.

        The worker pool is shut down on every exit path, so running handlers
        finish before this method returns.

        Args:
            port: Port to bind (default: the configured port)

        Returns:
            bool: True after a clean stop, False if the socket could not be bound
        """
        if port is None:
            port = self.config.port

        try:
            self.server_socket = self._create_server_socket(self.config.host, port)
            self._port = self.server_socket.getsockname()[1]
        except OSError as e:
            self.logger.error(f"Could not bind {self.config.host}:{port}: {e}")
            self.server_socket = None
            self.pool.shutdown()
            return False

        self.is_running = True
        self.logger.info(f"Server started and bound to http://{self.config.host}:{self.port}")
        self.logger.info(f"Serving {len(self.registry)} files from {self.config.root_folder} "
                         f"with {self.pool.capacity} workers")
        self.ready.set()

        try:
            self._accept_connections()
        finally:
            self.is_running = False
            self.logger.info("Shutting down server...")
            self.server_socket.close()
            self.pool.shutdown()
            self.logger.info("Server shutdown complete")

        return True

    def _create_server_socket(self, host, port):
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((host, port))
            server_socket.listen(self.config.connection_queue)
            server_socket.settimeout(ACCEPT_POLL_INTERVAL)
        except OSError:
            server_socket.close()
            raise
        return server_socket

    def _accept_connections(self):
        """
        Accept incoming connections.

        Accepting and dispatching are separate steps: the socket is handed to
        the pool and the loop goes straight back to accept().
        """
        while not self._stop_requested.is_set():
            try:
                client_socket, client_address = self.server_socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                self.logger.error(f"Error accepting connection: {e}")
                time.sleep(ACCEPT_ERROR_BACKOFF)
                continue

            self._dispatch(client_socket, client_address)

    def _dispatch(self, client_socket, client_address):
        try:
            client_socket.settimeout(self.config.request_timeout)
            self.pool.submit(self.request_handler.handle, client_socket, client_address)
        except (OSError, RuntimeError) as e:
            self.logger.error(f"Could not dispatch connection from {client_address}: {e}")
            client_socket.close()
