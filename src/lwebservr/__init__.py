"""
=============================================================================
LWEBSERVR - Serve Local Files via HTTP
=============================================================================

A minimal static file server for local development: it binds a port on
127.0.0.1, serves files from a directory one request at a time, and
answers 200, 404 or 405. Nothing more.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    lwebservr/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m lwebservr)
    ├── server.py            # HTTPServer: the per-connection pipeline
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # "GET /x from 127.0.0.1 -> 200 OK" lines
    ├── core/                # Sockets
    │   ├── socket_server.py # Listening socket, sequential accept loop
    │   └── connection.py    # One client: read once, write, close
    ├── http/                # Protocol
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # HttpOutcome and its serialization
    │   ├── status_codes.py  # 200 / 404 / 405
    │   └── mime_types.py    # Extension → Content-Type
    └── handlers/
        └── static.py        # (method, path) → HttpOutcome

=============================================================================
QUICK START
=============================================================================

    from lwebservr import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080, document_root="./public"))
    server.run()

=============================================================================
WHAT IT DOES NOT DO
=============================================================================

- No concurrency: one connection at a time
- No keep-alive, chunked encoding, ranges, caching headers
- No directory listings, no request bodies, no methods besides GET
- No path sanitization: "/../secret.txt" is read if it exists.
  Keep it on 127.0.0.1.

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
