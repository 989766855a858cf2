"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Binds the listening socket and runs the accept loop. Each accepted
client is wrapped in a Connection and handed to a callback, which
handles it COMPLETELY before the loop accepts the next one.

=============================================================================
SEQUENTIAL ACCEPT LOOP
=============================================================================

    socket() → bind(127.0.0.1:port) → listen(backlog)
        │
        └──► while running:
                 accept()              ◄── blocks (polls every second)
                 Connection(...)
                 handler(conn)         ◄── read, parse, resolve, write,
                                           close; nothing else runs
                                           meanwhile

There is no thread pool. Requests are served in the order they were
accepted. Connections that arrive while one is being handled wait in the
kernel's listen backlog.

The 1 second timeout only applies to accept(), so that shutdown() and
signals are noticed. Client reads and writes have no timeout.

=============================================================================
ERRORS
=============================================================================

    bind() fails        → ServerStartError (cause: the OSError), fatal
    handler(conn) fails → logged, loop continues with the next client
    accept() fails      → logged, loop stops

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Callable, Optional, Tuple

from .connection import Connection
from ..config import ServerConfig


logger = logging.getLogger(__name__)


class ServerStartError(Exception):
    """Raised when the listening socket cannot be set up."""


class SocketServer:
    """
    TCP server that accepts connections one at a time.

    Usage:
        def handle_connection(conn: Connection):
            with conn:
                ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    # How often accept() wakes up to check for shutdown
    ACCEPT_POLL_INTERVAL = 1.0

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is bound and listening
        self._ready_event = threading.Event()
        # Set when the server stops
        self._shutdown_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        """Check if server is running."""
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        Get the server's address (IP, port).

        Once listening, this is the real bound address, so port 0 in the
        config shows up as the port the OS picked.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the server socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Allow restarting right away without "Address already in use"
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Lower latency for small responses
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        sock.settimeout(self.ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """
        Install SIGTERM/SIGINT handlers for graceful shutdown.

        Python only allows this from the main thread; when the server runs
        in another thread (tests, embedding) the caller stops it with
        shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def bind(self):
        """
        Create the socket, bind it and start listening.

        Raises:
            ServerStartError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
            self._socket.listen(self.config.backlog)
        except OSError as e:
            self._socket.close()
            self._socket = None
            raise ServerStartError(
                f"could not bind to {self.config.host}:{self.config.port}"
            ) from e

        logger.info(f"Server listening on {self.address[0]}:{self.address[1]}")

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Start accepting connections.

        Binds first if bind() was not called yet. BLOCKS until shutdown()
        is called.

        Args:
            connection_handler: Called with each new connection. It must
                                finish with the connection before
                                returning.
        """
        if self._socket is None:
            self.bind()

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Main loop: accept, handle, repeat."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Check self._running again
            except OSError as e:
                # Socket error - usually means we're shutting down
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                read_size=self.config.read_size,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                # One bad connection never takes the listener down
                logger.exception(f"[{conn.id}] Unhandled error: {e}")
                conn.close()

    def shutdown(self):
        """
        Stop the accept loop.

        Safe to call from a signal handler or another thread, and safe to
        call more than once. The loop notices within ACCEPT_POLL_INTERVAL
        unless it is busy with a connection.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        self._shutdown_event.set()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the server is listening.

        Returns:
            True if listening, False on timeout.
        """
        return self._ready_event.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the server to stop.

        Returns:
            True if shutdown completed, False on timeout.
        """
        return self._shutdown_event.wait(timeout)
