"""
pytest configuration and fixtures.
"""

import socket
import threading
from datetime import datetime
from typing import Callable, Generator, Tuple
import pytest

# Add the project root to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from staticserver import WebServer, PathRegistry, RequestHandler, Outcome


FIXED_TIME = datetime(2024, 1, 1, 0, 0, 0)

INDEX_BODY = b"<p>hi</p>\n"  # 10 bytes
BINARY_BODY = bytes(range(256)) * 4


def read_all(sock: socket.socket) -> bytes:
    """Read from a socket until the peer closes it."""
    chunks = []
    while True:
        try:
            chunk = sock.recv(65536)
        except ConnectionResetError:
            break
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    """A static root with a few representative files."""
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_BODY)
    (root / "classic.html").write_text("Time: {time}", encoding="utf-8")
    (root / "style.css").write_bytes(b"body { color: red; }")
    (root / "blob.unknownext").write_bytes(BINARY_BODY)
    (root / "nested").mkdir()
    (root / "nested" / "inner.html").write_bytes(b"inner")
    return root


@pytest.fixture
def registry(static_root: Path) -> PathRegistry:
    return PathRegistry.load(str(static_root))


@pytest.fixture
def handler(static_root: Path, registry: PathRegistry) -> RequestHandler:
    """Request handler with a frozen clock."""
    return RequestHandler(str(static_root), registry, clock=lambda: FIXED_TIME)


@pytest.fixture
def exchange() -> Callable[..., Tuple[Outcome, bytes]]:
    """
    Run one request through a handler over a socket pair.

    Returns a function ``(handler, request_bytes) -> (outcome, response_bytes)``.
    """
    def _exchange(request_handler: RequestHandler, request: bytes):
        server_side, client_side = socket.socketpair()
        with client_side:
            client_side.sendall(request)
            client_side.shutdown(socket.SHUT_WR)
            outcome = request_handler.handle(server_side, ("127.0.0.1", 50000))
            assert server_side.fileno() == -1, "handler must close the connection"
            return outcome, read_all(client_side)

    return _exchange


def http_request(port: int, request: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and return everything it answers."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as sock:
        sock.sendall(request)
        return read_all(sock)


class BackgroundServer:
    """Runs WebServer.listen() in a background thread."""

    def __init__(self, server: WebServer):
        self.server = server
        self.result = None
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.port

    def _run(self):
        self.result = self.server.listen()

    def start(self):
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        if not self.server.ready.wait(5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.stop()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, request: bytes) -> bytes:
        return http_request(self.port, request)


@pytest.fixture
def make_server(static_root: Path) -> Generator[Callable[..., BackgroundServer], None, None]:
    """Factory for background servers bound to an OS-assigned port."""
    started = []

    def _make(**overrides) -> BackgroundServer:
        options = dict(
            root_folder=str(static_root),
            host="127.0.0.1",
            port=0,
            pool_size=4,
            request_timeout=5,
        )
        options.update(overrides)
        background = BackgroundServer(WebServer(**options))
        background.start()
        started.append(background)
        return background

    yield _make

    for background in started:
        background.stop()


@pytest.fixture
def running_server(make_server) -> BackgroundServer:
    return make_server()
