"""
=============================================================================
STATIC FILE RESOLUTION
=============================================================================

Decides what to answer for a (method, path) pair: serve a file, 404, or
405. This is where almost all of the server's decisions are made.

=============================================================================
FLOW
=============================================================================

    resolve("GET", "css/site.css")
        │
        ├── method.upper() != "GET"?  → 405 Method not allowed
        │
        ├── path == ""?               → "index.html"
        │
        ├── content type from extension (mime_types.get_mime_type)
        │
        ├── document_root / filename   (plain join, nothing else)
        │
        └── read as UTF-8 text
                ├── ok     → 200 + content type + body
                └── error  → 404 (cause kept on the outcome)

=============================================================================
NO PATH SANITIZATION
=============================================================================

The filename is joined onto the document root exactly like a plain path
join would do it:

    root / "a/../b.txt"     → "<root>/a/../b.txt"  (OS resolves the "..")
    root / "/etc/hosts"     → "/etc/hosts"          (absolute wins)

This server is meant for serving a local directory to yourself on
127.0.0.1. It must not be exposed to untrusted clients.

=============================================================================
ALL READ ERRORS ARE 404
=============================================================================

Missing file, permission denied, a directory, a binary (non UTF-8) file,
an I/O error, a name with a NUL byte: the client sees "404 Not Found" for
all of them. The real error is stored on HttpOutcome.cause so the server
can log it.

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..http.response import HttpOutcome
from ..http.mime_types import get_mime_type


logger = logging.getLogger(__name__)


INDEX_FILE = "index.html"


@dataclass(frozen=True)
class FileReadResult:
    """
    Outcome of reading a file as text.

    Exactly one of content / error is set.
    """

    path: Path
    content: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def read_text_file(path: Path) -> FileReadResult:
    """
    Read path as strict UTF-8 text.

    The bytes are decoded as-is: no newline translation, so a file with
    CRLF line endings is served byte-for-byte.
    """
    try:
        content = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        return FileReadResult(path=path, error=e)
    return FileReadResult(path=path, content=content)


class StaticFileHandler:
    """
    Resolves requests to files under a document root.

    =========================================================================
    USAGE
    =========================================================================

        handler = StaticFileHandler("/home/me/site")

        handler.resolve("GET", "")            # → <root>/index.html
        handler.resolve("GET", "notes.txt")   # → 200 text/plain, or 404
        handler.resolve("DELETE", "x")        # → 405

    The document root is passed in explicitly, so the handler does not
    depend on the process working directory.

    =========================================================================
    """

    def __init__(self, document_root: Union[str, Path], index_file: str = INDEX_FILE):
        """
        Args:
            document_root: Directory request paths are joined onto.
            index_file: File served for the empty path.
        """
        self.document_root = Path(document_root)
        self.index_file = index_file

    def resolve(self, method: str, path: str) -> HttpOutcome:
        """
        Decide the outcome for a request. Never raises.

        Args:
            method: Request method, any case.
            path: Requested path without the leading slash.

        Returns:
            HttpOutcome with status 200, 404 or 405.
        """
        if method.upper() != "GET":
            return HttpOutcome.method_not_allowed()

        return self.resolve_file(path)

    def resolve_file(self, path: str) -> HttpOutcome:
        """Serve the file for a GET of path."""
        filename = path or self.index_file
        content_type = get_mime_type(filename)

        result = read_text_file(self.document_root / filename)
        if not result.ok:
            logger.debug(f"Cannot serve {result.path}: {result.error!r}")
            return HttpOutcome.not_found(cause=result.error)

        return HttpOutcome.ok(content_type, result.content)


def serve_static(document_root: Union[str, Path], **kwargs) -> StaticFileHandler:
    """
    Create a static file handler.

    Convenience function matching StaticFileHandler's signature.
    """
    return StaticFileHandler(document_root, **kwargs)
