"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       Bytes → ParsedRequest (first line only)            │
    │ response.py      HttpOutcome and its HTTP/1.0 serialization         │
    │ status_codes.py  200 / 404 / 405 and their reason phrases           │
    │ mime_types.py    Extension → Content-Type                           │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import (
    REQUEST_READ_SIZE,
    ParsedRequest,
    RequestParser,
    HTTPParseError,
    NoRequestLineError,
    MalformedRequestLineError,
    parse_request,
)
from .response import HttpOutcome
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, DEFAULT_MIME_TYPE

__all__ = [
    # Request parsing
    "REQUEST_READ_SIZE",
    "ParsedRequest",
    "RequestParser",
    "HTTPParseError",
    "NoRequestLineError",
    "MalformedRequestLineError",
    "parse_request",

    # Outcomes
    "HttpOutcome",
    "HTTPStatus",

    # MIME types
    "get_mime_type",
    "DEFAULT_MIME_TYPE",
]
