#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
HTTP Request Handler Module for the Static File Server
------------------------------------------------------
Reads a single request line from a connection, checks the requested path
against the registry and writes a framed HTTP response. Each connection
serves exactly one request and is always closed afterwards.
"""

import os
import enum
import shutil
import logging
import traceback
from collections import namedtuple
from datetime import datetime

from .utils import get_mime_type

NOT_FOUND_RESPONSE = (
    b"HTTP/1.1 404 Not Found\r\n"
    b"Content-Length: 0\r\n"
    b"Connection: close\r\n"
    b"\r\n"
)

TIME_PLACEHOLDER = '{time}'

ParsedRequest = namedtuple('ParsedRequest', ['method', 'path', 'version'])


class Outcome(enum.Enum):
    """How a connection ended."""

    CLOSED = 'closed'          # peer sent nothing
    MALFORMED = 'malformed'    # request line was not three tokens
    NOT_FOUND = 'not_found'
    OK = 'ok'
    FAILED = 'failed'          # I/O or unexpected error, connection dropped


def parse_request_line(line):
    """
    Parse a request line of the form ``METHOD SP PATH SP VERSION``.

    Args:
        line: Request line without its line terminator

    Returns:
        ParsedRequest or None if the line does not have exactly three tokens
    """
    parts = line.split(' ')
    if len(parts) != 3:
        return None
    return ParsedRequest(*parts)


def build_ok_head(content_type, content_length):
    """Status line and headers of a 200 response, blank line included."""
    return (
        "HTTP/1.1 200 OK\r\n"
        f"Content-Type: {content_type}\r\n"
        f"Content-Length: {content_length}\r\n"
        "Connection: close\r\n"
        "\r\n"
    ).encode('ascii')


class RequestHandler:
    """
    Handles a single connection: one request line in, one response out.

    The handler never raises. Every failure is logged and reported through
    the returned :class:`Outcome`, so the worker pool running it needs no
    error handling of its own.
    """

    def __init__(self, root_folder, registry, template_path='/classic.html',
                 max_line_length=8192, clock=datetime.now):
        """
        Initialize the request handler.

        Args:
            root_folder: Static root the registry was built from
            registry: PathRegistry with the servable paths
            template_path: Path whose ``{time}`` placeholders are rendered
            max_line_length: Longest accepted request line, in bytes
            clock: Callable returning the current datetime
        """
        self.root_folder = root_folder
        self.registry = registry
        self.template_path = template_path
        self.max_line_length = max_line_length
        self.clock = clock
        self.logger = logging.getLogger('RequestHandler')

    def handle(self, client_socket, client_address=None):
        """
        Handle one connection and close it.

        Args:
            client_socket: Accepted client socket
            client_address: Client address tuple (ip, port)

        Returns:
            Outcome: How the connection ended
        """
        peer = self._format_peer(client_address)

        try:
            with client_socket.makefile('rb') as rfile, client_socket.makefile('wb') as wfile:
                return self._process(rfile, wfile, peer)
        except OSError as e:
            self.logger.warning(f"I/O error while serving {peer}: {e}")
            return Outcome.FAILED
        except Exception as e:
            self.logger.error(f"Error handling request from {peer}: {e}")
            self.logger.debug(traceback.format_exc())
            return Outcome.FAILED
        finally:
            client_socket.close()

    def _process(self, rfile, wfile, peer):
        # Room for the line plus its CRLF terminator
        raw_line = rfile.readline(self.max_line_length + 2)

        if not raw_line:
            self.logger.debug(f"{peer} closed the connection without sending a request")
            return Outcome.CLOSED

        truncated = len(raw_line) > self.max_line_length + 1 and not raw_line.endswith(b'\n')
        if truncated or len(raw_line.rstrip(b'\r\n')) > self.max_line_length:
            self.logger.warning(f"Request line from {peer} exceeds {self.max_line_length} bytes")
            return Outcome.MALFORMED

        request_line = raw_line.decode('utf-8', 'replace').rstrip('\r\n')
        request = parse_request_line(request_line)

        if request is None:
            self.logger.warning(f"Malformed request line from {peer}: {request_line!r}")
            return Outcome.MALFORMED

        if request.path not in self.registry:
            wfile.write(NOT_FOUND_RESPONSE)
            wfile.flush()
            self.logger.info(f"{peer} - {request.method} {request.path} - 404")
            return Outcome.NOT_FOUND

        file_path = os.path.join(self.root_folder, request.path.lstrip('/'))
        content_type = get_mime_type(file_path)

        if request.path == self.template_path:
            self._send_template(wfile, file_path, content_type)
        else:
            self._send_file(wfile, file_path, content_type)

        wfile.flush()
        self.logger.info(f"{peer} - {request.method} {request.path} - 200")
        return Outcome.OK

    def render_template(self, file_path):
        """
        Read a template file and replace every ``{time}`` with the current time.

        Args:
            file_path: Path to the template file

        Returns:
            bytes: The rendered, UTF-8 encoded body
        """
        with open(file_path, 'r', encoding='utf-8', newline='') as f:
            template = f.read()
        return template.replace(TIME_PLACEHOLDER, self.clock().isoformat()).encode('utf-8')

    def _send_template(self, wfile, file_path, content_type):
        body = self.render_template(file_path)
        wfile.write(build_ok_head(content_type, len(body)))
        wfile.write(body)

    def _send_file(self, wfile, file_path, content_type):
        # Open before writing anything so a vanished file drops the
        # connection instead of sending a truncated 200.
        with open(file_path, 'rb') as f:
            length = os.fstat(f.fileno()).st_size
            wfile.write(build_ok_head(content_type, length))
            shutil.copyfileobj(f, wfile)

    @staticmethod
    def _format_peer(client_address):
        if not client_address:
            return 'unknown peer'
        if isinstance(client_address, tuple) and len(client_address) >= 2:
            return f"{client_address[0]}:{client_address[1]}"
        return str(client_address)
