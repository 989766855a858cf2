"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server only ever produces three status codes:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK                 - File found and read as text          │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  404   │ Not Found          - Any failure to read the file         │
    │        │                      (missing, permission, directory,     │
    │        │                       not UTF-8, I/O error...)            │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  405   │ Method not allowed - Anything that is not GET             │
    └────────┴───────────────────────────────────────────────────────────┘

Malformed requests never get a status code at all; the connection is
simply closed (see server.py).

NOTE: the 405 reason phrase is "Method not allowed" (lowercase), not the
RFC's "Method Not Allowed". Clients that parse the status line read it
as-is, so it stays that way.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.METHOD_NOT_ALLOWED.phrase
        'Method not allowed'
    """

    OK = 200                    # File served
    NOT_FOUND = 404             # File could not be read
    METHOD_NOT_ALLOWED = 405    # Non-GET request

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.0 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method not allowed",
}
