"""
AssetDock Backend - MIME Resolver
===================================

What:  Maps a file extension to the Content-Type served for it.
How:   Takes the substring after the last "." of the path, lower-cases it
       and looks it up in a fixed table. Unknown or missing extensions map
       to `application/octet-stream`.

The type is derived from the name only. File contents are never inspected,
so a renamed file is served with the type its name claims, and the
`X-Content-Type-Options: nosniff` header keeps browsers from second-guessing.
"""

from types import MappingProxyType
from typing import Mapping

DEFAULT_MIME_TYPE = "application/octet-stream"
HTML_MIME_TYPE = "text/html; charset=utf-8"

# ── MIME Table ────────────────────────────────────────────────────────────
# Keys: lower-cased extension without the leading dot
MIME_TYPES: Mapping[str, str] = MappingProxyType({
    # Documents and code
    "html": HTML_MIME_TYPE,
    "css": "text/css; charset=utf-8",
    "js": "application/javascript; charset=utf-8",
    "json": "application/json; charset=utf-8",
    # Images
    "ico": "image/x-icon",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    # Fonts
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "eot": "application/vnd.ms-fontobject",
    "otf": "font/otf",
})


def resolve_mime_type(path: str) -> str:
    """
    Return the MIME type for `path` based on its extension.

    Examples:
        resolve_mime_type("admin/app.js")   → "application/javascript; charset=utf-8"
        resolve_mime_type("A.JS")           → "application/javascript; charset=utf-8"
        resolve_mime_type("admin/README")   → "application/octet-stream"
    """
    _, dot, extension = path.rpartition(".")
    if not dot:
        return DEFAULT_MIME_TYPE
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)
