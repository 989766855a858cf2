"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket. Every connection serves exactly ONE
request and is then closed (HTTP/1.0 style, no keep-alive).

=============================================================================
ONE READ, AT MOST 512 BYTES
=============================================================================

TCP is a byte stream, so a request may in theory arrive in several
pieces. This server does not care: it performs a single recv() of at most
read_size bytes and parses whatever came back.

    Client sends:   GET /index.html HTTP/1.1\r\nHost: ...\r\n\r\n
    Server reads:   first ≤ 512 bytes, in one recv()
    Rest:           never read (drained and discarded on close)

In practice the request line of a local browser or curl request always
arrives in the first segment.

The read has NO timeout. A client that connects and never sends anything
blocks the server until it goes away. Connections are handled one at a
time, so that stalls everyone else too.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    ACCEPTED ──► READ ──► PARSED ──► RESOLVED ──► WRITTEN ──┐
                   │                                          │
                   └────► FAILED ─────────────────────────────┤
                                                              ▼
                                                           CLOSED

FAILED covers parse errors and I/O errors: the remaining steps are
skipped and the connection is closed without a response.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
import uuid

from ..http.request import REQUEST_READ_SIZE


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, mostly useful for logging and tests."""
    ACCEPTED = "accepted"    # Just accepted, nothing read yet
    READ = "read"            # Request bytes received
    PARSED = "parsed"        # Request line parsed
    FAILED = "failed"        # Parse or I/O error, no response will be sent
    RESOLVED = "resolved"    # Outcome decided
    WRITTEN = "written"      # Response sent
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        read_size: Maximum number of bytes read from the client.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)
    read_size: int = REQUEST_READ_SIZE

    def __post_init__(self):
        # Plain blocking I/O: no deadline on reads or writes
        self.socket.settimeout(None)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        """Get the client port."""
        return self.address[1]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read the start of the request.

        Performs a single blocking recv() of at most read_size bytes.

        Returns:
            The bytes received. Empty if the client closed the connection
            (or reset it) without sending anything.
        """
        try:
            data = self.socket.recv(self.read_size)
        except (ConnectionResetError, BrokenPipeError):
            # Client disconnected abruptly
            data = b""

        self.state = ConnectionState.READ
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response data to the client.

        sendall() either sends everything or raises, so there is nothing
        left to flush afterwards.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            self.state = ConnectionState.FAILED
            return False

        self.state = ConnectionState.WRITTEN
        return True

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, the client sees end of response
        2. drain whatever the client still sends (unread request bytes
           past read_size), so the kernel does not answer with RST and
           cut off the response
        3. close() the socket
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        """
        Allows using Connection with 'with' statement:

            with conn:
                data = conn.read_request()
                conn.send_response(response)
            # Connection closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
