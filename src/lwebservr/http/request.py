"""
=============================================================================
HTTP REQUEST LINE PARSING
=============================================================================

This module turns the raw bytes read from a connection into a
ParsedRequest (method + path).

=============================================================================
WHAT WE ACTUALLY LOOK AT
=============================================================================

Only the FIRST LINE of the request is parsed:

    GET /css/site.css HTTP/1.1\r\n         ← request line (parsed)
    Host: localhost:8080\r\n               ← ignored
    User-Agent: curl/8.4.0\r\n             ← ignored
    \r\n                                   ← ignored
    [body]                                 ← ignored

And only the first REQUEST_READ_SIZE (512) bytes of a connection are
ever read. Anything past that (long cookies, a request body...) is never
inspected. This is a fixed property of the server, not an oversight.

=============================================================================
REQUEST LINE SHAPE
=============================================================================

    REQUEST_LINE_PATTERN: ([^ ]+) /([^ ]*) (.*)

        ([^ ]+)   - Capture group 1: METHOD (anything except space)
        ` /`      - Single space and a literal slash
        ([^ ]*)   - Capture group 2: PATH (may be empty: "GET / HTTP/1.0")
        ` `       - Single space
        (.*)      - Capture group 3: version, ignored

    "GET /index.html HTTP/1.1"   → method="GET",  path="index.html"
    "GET / HTTP/1.1"             → method="GET",  path=""
    "post /a/b.txt HTTP/1.0"     → method="post", path="a/b.txt"
    "GET index.html HTTP/1.1"    → MalformedRequestLineError (no slash)
    "GET"                        → MalformedRequestLineError

The path is kept exactly as received: no percent-decoding, no query
string splitting, no ".." checks.

=============================================================================
ERRORS
=============================================================================

    HTTPParseError
        ├── NoRequestLineError          - nothing was received
        └── MalformedRequestLineError   - first line has the wrong shape

Neither produces an HTTP response. The server drops the connection and
moves on to the next one.

=============================================================================
"""

from dataclasses import dataclass, field
import re


# Only the first 512 bytes of each connection are ever read.
REQUEST_READ_SIZE = 512


class HTTPParseError(Exception):
    """
    Raised when the request line cannot be parsed.

    Parse errors are connection-scoped: they abort handling of the one
    connection they occurred on and never reach the client as a status.
    """


class NoRequestLineError(HTTPParseError):
    """The connection sent no data, so there is no request line."""


class MalformedRequestLineError(HTTPParseError):
    """The first line does not look like "<METHOD> /<path> <version>"."""

    def __init__(self, line: str):
        super().__init__(f"Malformed request line: {line!r}")
        self.line = line


@dataclass(frozen=True)
class ParsedRequest:
    """
    The two things the server needs from a request, plus the raw text.

    Attributes:
        method: Method token as received ("GET", "get", "POST"...).
                Case is only normalized at dispatch time.
        path:   Requested path WITHOUT the leading slash, not decoded.
                Empty string for "GET / HTTP/1.1".
        raw:    The whole (lossily decoded) text that was read. Only used
                for the verbose request dump.
    """

    method: str
    path: str
    raw: str = field(default="", repr=False)


class RequestParser:
    """
    Parses the start of a connection into a ParsedRequest.

        Raw bytes (≤ 512)
              │
              ▼
        1. Decode as UTF-8, invalid bytes → U+FFFD (never fails)
              │
              ▼
        2. Empty? → NoRequestLineError
              │
              ▼
        3. First line (up to "\\n", trailing "\\r" dropped)
              │
              ▼
        4. Match REQUEST_LINE_PATTERN → MalformedRequestLineError
              │
              ▼
        ParsedRequest(method, path, raw)

    The parser keeps no state between calls, one instance can be reused
    for every connection.
    """

    REQUEST_LINE_PATTERN = re.compile(r"([^ ]+) /([^ ]*) (.*)")

    def parse(self, data: bytes) -> ParsedRequest:
        """
        Parse raw request bytes.

        Args:
            data: Bytes read from the connection.

        Returns:
            ParsedRequest with method and path.

        Raises:
            NoRequestLineError: If data is empty.
            MalformedRequestLineError: If the first line has the wrong shape.
        """
        # Lossy decoding: malformed UTF-8 must never crash the server
        text = data.decode("utf-8", errors="replace")
        if not text:
            raise NoRequestLineError("Empty request: no request line")

        method, path = self._parse_request_line(self._first_line(text))
        return ParsedRequest(method=method, path=path, raw=text)

    def _first_line(self, text: str) -> str:
        """Return the first line of text, without its line terminator."""
        line = text.split("\n", 1)[0]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def _parse_request_line(self, line: str) -> tuple[str, str]:
        """
        Extract (method, path) from the request line.

        Raises:
            MalformedRequestLineError: If the line does not match.
        """
        match = self.REQUEST_LINE_PATTERN.search(line)
        if not match:
            raise MalformedRequestLineError(line)

        method, path, _version = match.groups()
        return method, path


def parse_request(data: bytes) -> ParsedRequest:
    """
    Convenience function to parse a request in one call.

    Use RequestParser directly when parsing many requests.
    """
    return RequestParser().parse(data)
