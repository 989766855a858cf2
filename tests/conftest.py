"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Optional
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lwebservr import HTTPServer, ServerConfig


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """A document root with a few files in it."""
    (tmp_path / "index.html").write_text("<h1>hi</h1>", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("héllo wörld", encoding="utf-8")
    (tmp_path / "css").mkdir()
    (tmp_path / "css" / "site.css").write_text("body { color: red; }", encoding="utf-8")
    (tmp_path / "app.js").write_text("console.log(1);", encoding="utf-8")
    (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\x00\x01")
    return tmp_path


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class, despite the name

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes, timeout: float = 5.0) -> bytes:
        """Send raw bytes, return everything the server answers."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as s:
            if data:
                s.sendall(data)
            s.shutdown(socket.SHUT_WR)
            return recv_all(s)


def recv_all(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def make_test_server(docroot: Path, **overrides) -> TestServer:
    options = dict(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        document_root=str(docroot),
        log_level="INFO",
    )
    options.update(overrides)
    return TestServer(HTTPServer(ServerConfig(**options)))


@pytest.fixture
def test_server(docroot: Path) -> Generator[TestServer, None, None]:
    """A running server on a random port, serving the docroot fixture."""
    test_srv = make_test_server(docroot)
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def server_factory(docroot: Path):
    """Start servers with custom config; all are stopped after the test."""
    started = []

    def factory(**overrides) -> TestServer:
        test_srv = make_test_server(docroot, **overrides)
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield factory

    for test_srv in started:
        test_srv.stop()
