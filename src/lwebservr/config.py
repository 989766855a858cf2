"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m lwebservr --port 3000 --silent                   │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── LWEBSERVR_PORT=3000 python -m lwebservr                    │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validation happens once, at startup (fail-fast).

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .http.request import REQUEST_READ_SIZE


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUE_VALUES


@dataclass
class ServerConfig:
    """
    Configuration for the server.

    NETWORK
    - host, port, backlog, read_size

    FILES
    - document_root

    CONSOLE OUTPUT
    - verbose, silent, log_level

    Example:
        ServerConfig(port=3000, document_root="./public", silent=True)
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to. Loopback only: this server does no path
    sanitization and must not be reachable from other machines.
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port
    (handy in tests).
    """

    backlog: int = 128
    """
    Maximum number of queued connections. Since requests are handled one
    at a time, this is where everybody else waits.
    """

    read_size: int = REQUEST_READ_SIZE
    """
    Number of bytes read from each connection (once). Anything the client
    sends beyond this is ignored.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    document_root: Optional[str] = None
    """
    Directory request paths are resolved against.
    None = the working directory at the time the server starts.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONSOLE OUTPUT
    # ─────────────────────────────────────────────────────────────────────

    verbose: bool = False
    """Log the full raw request text after each request."""

    silent: bool = False
    """Suppress the startup banner and the per-request log line."""

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        LWEBSERVR_HOST       Server host (default: 127.0.0.1)
        LWEBSERVR_PORT       Server port (default: 8080)
        LWEBSERVR_ROOT       Document root (default: working directory)
        LWEBSERVR_VERBOSE    1/true/yes/on to dump raw requests
        LWEBSERVR_SILENT     1/true/yes/on to suppress request logging
        LWEBSERVR_LOG_LEVEL  Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("LWEBSERVR_HOST", "127.0.0.1"),
            port=int(os.getenv("LWEBSERVR_PORT", "8080")),
            document_root=os.getenv("LWEBSERVR_ROOT") or None,
            verbose=_env_flag("LWEBSERVR_VERBOSE"),
            silent=_env_flag("LWEBSERVR_SILENT"),
            log_level=os.getenv("LWEBSERVR_LOG_LEVEL", "INFO"),
        )

    @property
    def log_level_number(self) -> int:
        """The log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def resolve_document_root(self) -> str:
        """Return the configured document root, or the current directory."""
        return os.path.abspath(self.document_root or os.getcwd())

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: With a message suitable for the console.
        """
        if not 0 <= self.port <= 65535:
            raise ValueError("port must be a number between 1 and 65535")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.read_size < 1:
            raise ValueError("read_size must be >= 1")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.document_root is not None and not os.path.isdir(self.document_root):
            raise ValueError(f"Document root is not a directory: {self.document_root}")
