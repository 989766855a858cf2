"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties the components together into the request-handling pipeline.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. ACCEPT
       └── SocketServer accepts one TCP connection

    2. READ
       └── Connection.read_request(): one recv() of ≤ 512 bytes

    3. PARSE
       └── RequestParser → ParsedRequest(method, path)
           (parse error → log warning, close, go to 1)

    4. RESOLVE
       └── StaticFileHandler.resolve(method, path) → HttpOutcome

    5. WRITE
       └── HttpOutcome.to_bytes() → Connection.send_response()

    6. LOG
       └── "GET /index.html from 127.0.0.1 -> 200 OK"

    7. CLOSE
       └── and back to 1 for the next client

Nothing is shared between requests, and nothing runs in parallel: step 1
for the next client only happens after step 7 for the current one.

=============================================================================
ERROR POLICY
=============================================================================

Whatever goes wrong with one connection (garbage request, client hanging
up mid-write, unexpected exception) only affects that connection. The
listener keeps running.

=============================================================================
"""

import logging
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .http import RequestParser, HTTPParseError
from .handlers import StaticFileHandler
from .access_log import AccessLog


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Local static file server.

    Usage:
        server = HTTPServer(ServerConfig(port=8080))
        server.run()  # Blocks until Ctrl+C / SIGTERM / shutdown()

    Components:
        - SocketServer: listening socket and accept loop
        - RequestParser: request line parsing
        - StaticFileHandler: (method, path) → outcome, created at startup
          with the resolved document root
        - AccessLog: per-request console lines
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults are used if omitted.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._access_log = AccessLog(
            silent=self.config.silent,
            verbose=self.config.verbose,
        )

        # Built in run(), once the document root is known
        self._handler: Optional[StaticFileHandler] = None

        self._running = False

    @property
    def address(self) -> Tuple[str, int]:
        """The (host, port) the server is bound to."""
        return self._socket_server.address

    @property
    def document_root(self) -> Optional[str]:
        """The document root in use, once the server has started."""
        if self._handler is None:
            return None
        return str(self._handler.document_root)

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            ServerStartError: If the port cannot be bound.
        """
        self._setup_logging()

        self._handler = StaticFileHandler(self.config.resolve_document_root())

        self._socket_server.bind()
        self._running = True

        if not self.config.silent:
            self._print_startup_banner()

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def shutdown(self):
        """Ask the accept loop to stop. Safe from any thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Block until the accept loop has exited."""
        return self._socket_server.wait_for_shutdown(timeout)

    def _print_startup_banner(self):
        """Print server startup information."""
        print(
            f"Starting webserver on port {self.address[1]}, "
            f"files will be served from {self.document_root}",
            flush=True,
        )

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_number

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("lwebservr").setLevel(level)
        # Request lines are switched off by silent, not by the level
        logging.getLogger("lwebservr.access").setLevel(min(level, logging.INFO))

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _process_connection(self, conn: Connection):
        """
        Handle one connection from read to close.

        Called by SocketServer for each accepted connection, in the accept
        loop's thread.
        """
        with conn:
            try:
                raw_request = conn.read_request()
            except OSError as e:
                conn.state = ConnectionState.FAILED
                logger.warning(f"[{conn.id}] Read from {conn.client_ip} failed: {e}")
                return

            try:
                request = self._parser.parse(raw_request)
            except HTTPParseError as e:
                # No response for malformed requests, just drop the connection
                conn.state = ConnectionState.FAILED
                logger.warning(f"[{conn.id}] Dropping connection from {conn.client_ip}: {e}")
                return
            conn.state = ConnectionState.PARSED

            outcome = self._handler.resolve(request.method, request.path)
            conn.state = ConnectionState.RESOLVED

            if not conn.send_response(outcome.to_bytes()):
                return

            self._access_log.log(request, outcome, conn.client_ip)


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create a server instance.

    Example:
        app = create_app(ServerConfig(port=3000))
        app.run()
    """
    return HTTPServer(config)
