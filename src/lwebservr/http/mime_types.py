"""
=============================================================================
CONTENT TYPE INFERENCE
=============================================================================

Maps a filename's extension to the MIME type sent in the Content-Type
header of a 200 response.

The table is deliberately small. Anything not listed falls back to
application/octet-stream ("unknown binary data"), which browsers
download instead of rendering:

    ┌────────────────────────────────────────────────────────────────────┐
    │   extension     →   MIME type                                      │
    ├────────────────────────────────────────────────────────────────────┤
    │   html          →   text/html                                      │
    │   png           →   image/png                                      │
    │   txt           →   text/plain                                     │
    │   js            →   text/javascript                                │
    │   css           →   text/css                                       │
    │   (other/none)  →   application/octet-stream                       │
    └────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT COUNTS AS THE EXTENSION?
=============================================================================

The extension is everything after the LAST dot of the requested name,
exactly as received, and matched case-sensitively ("LOGO.PNG" is not png):

    "index.html"          → "html"
    "archive.tar.gz"      → "gz"     (octet-stream)
    "css/site.css"        → "css"
    "v1.2/readme"         → "2/readme"  (octet-stream, no real extension)
    "Makefile"            → no dot   (octet-stream)

This differs from pathlib's Path.suffix on purpose: the name is a raw
request path, not a normalized filesystem path.

=============================================================================
"""

from typing import Optional


MIME_TYPES = {
    "html": "text/html",
    "png": "image/png",
    "txt": "text/plain",
    "js": "text/javascript",
    "css": "text/css",
}

# Default MIME type for unknown or missing extensions
DEFAULT_MIME_TYPE = "application/octet-stream"


def get_extension(filename: str) -> Optional[str]:
    """
    Return the substring after the last "." in filename, or None if the
    name has no dot.

    Examples:
        >>> get_extension("style.css")
        'css'
        >>> get_extension("archive.tar.gz")
        'gz'
        >>> get_extension("README") is None
        True
    """
    _, dot, extension = filename.rpartition(".")
    if not dot:
        return None
    return extension


def get_mime_type(filename: str, default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension.

    Args:
        filename: Requested file name (may contain directories).
        default: MIME type to use when the extension is unknown.
                 Uses application/octet-stream if not specified.

    Returns:
        The MIME type string.

    Examples:
        >>> get_mime_type("index.html")
        'text/html'

        >>> get_mime_type("LOGO.PNG")
        'application/octet-stream'

        >>> get_mime_type("data.json")
        'application/octet-stream'
    """
    extension = get_extension(filename)
    if extension is None:
        return default or DEFAULT_MIME_TYPE

    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)
