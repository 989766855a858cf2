"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

    socket_server.py   Listening socket and the sequential accept loop
    connection.py      One client socket: single read, write, close

Connections are handled strictly one after another. There is no worker
pool: the accept loop calls the handler and waits for it to finish.

=============================================================================
"""

from .socket_server import SocketServer, ServerStartError
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",      # Accepts connections
    "ServerStartError",  # Bind/listen failure
    "Connection",        # Wrapper for client socket
    "ConnectionState",   # Connection lifecycle states
]
