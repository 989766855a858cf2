"""
=============================================================================
HTTP OUTCOMES AND RESPONSE SERIALIZATION
=============================================================================

An HttpOutcome is the decided result of handling a request, before it is
turned into bytes. There are exactly three kinds:

    HttpOutcome.ok(content_type, body)   → 200, file contents
    HttpOutcome.not_found(cause)         → 404, no body
    HttpOutcome.method_not_allowed()     → 405, no body

=============================================================================
WIRE FORMAT (HTTP/1.0)
=============================================================================

SUCCESS:

    HTTP/1.0 200\r\n                       ← no reason phrase
    Content-Type: text/html\r\n
    Content-Length: 11\r\n                 ← BYTES, not characters
    \r\n
    <h1>hi</h1>

FAILURE:

    HTTP/1.0 404 Not Found\r\n             ← status line only
                                             (no headers, no blank line)

Content-Length is the UTF-8 byte length of the body. For "héllo" that is
6, not 5. Getting this wrong truncates multi-byte pages in the browser.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.0"


@dataclass(frozen=True)
class HttpOutcome:
    """
    Result of resolving a request.

    Invariants:
        - content_type is set if and only if status is 200
        - body is empty unless status is 200

    Use the ok / not_found / method_not_allowed constructors rather than
    building one by hand, they keep the invariants.

    Attributes:
        status:       HTTP status (200, 404 or 405).
        content_type: MIME type of the body (200 only).
        body:         File contents as text (200 only).
        cause:        Why a 404 happened (FileNotFoundError,
                      PermissionError, UnicodeDecodeError...). Kept for
                      logging, never sent to the client.
    """

    status: HTTPStatus
    content_type: Optional[str] = None
    body: str = ""
    cause: Optional[BaseException] = field(default=None, repr=False, compare=False)

    @classmethod
    def ok(cls, content_type: str, body: str) -> "HttpOutcome":
        """200 with the given body."""
        return cls(status=HTTPStatus.OK, content_type=content_type, body=body)

    @classmethod
    def not_found(cls, cause: Optional[BaseException] = None) -> "HttpOutcome":
        """404, optionally remembering the underlying error."""
        return cls(status=HTTPStatus.NOT_FOUND, cause=cause)

    @classmethod
    def method_not_allowed(cls) -> "HttpOutcome":
        """405 for any method other than GET."""
        return cls(status=HTTPStatus.METHOD_NOT_ALLOWED)

    @property
    def status_message(self) -> str:
        """Reason phrase paired with the status ("OK", "Not Found"...)."""
        return self.status.phrase

    @property
    def content_length(self) -> int:
        """Byte length of the UTF-8 encoded body."""
        return len(self.body.encode("utf-8"))

    def to_text(self) -> str:
        """
        Render the response as text.

        Never fails: every outcome the resolver can produce has a
        representation.
        """
        if self.status == HTTPStatus.OK:
            return (
                f"{HTTP_VERSION} {int(self.status)}\r\n"
                f"Content-Type: {self.content_type}\r\n"
                f"Content-Length: {self.content_length}\r\n"
                f"\r\n"
                f"{self.body}"
            )

        return f"{HTTP_VERSION} {int(self.status)} {self.status_message}\r\n"

    def to_bytes(self) -> bytes:
        """Serialize the response for socket.sendall()."""
        return self.to_text().encode("utf-8")
