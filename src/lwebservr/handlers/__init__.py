"""
Request handlers.

    static.py   StaticFileHandler: (method, path) → HttpOutcome
"""

from .static import (
    INDEX_FILE,
    FileReadResult,
    StaticFileHandler,
    read_text_file,
    serve_static,
)

__all__ = [
    "INDEX_FILE",
    "FileReadResult",
    "StaticFileHandler",
    "read_text_file",
    "serve_static",
]
