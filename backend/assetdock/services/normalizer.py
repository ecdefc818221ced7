"""
AssetDock Backend - Path Normalizer
=====================================

What:  Maps an inbound request path onto the single registry key space.
How:   Leading slashes are dropped, then the namespace prefix is prepended
       unless the path already carries it:

           "app.js"            → "admin/app.js"
           "/admin/app.js"     → "admin/app.js"
           "dashboard/users/"  → "admin/dashboard/users/"

The normalizer does not resolve `..` segments. A key such as
`admin/../secrets` simply never matches, because the registry only holds
keys enumerated at startup and no filesystem path is opened per request.
"""


def normalize_path(request_path: str, namespace: str) -> str:
    """Return the registry key for `request_path` under `namespace`."""
    path = request_path.lstrip("/")
    if path.startswith(namespace):
        return path
    return f"{namespace}{path}"


def is_directory_route(request_path: str) -> bool:
    """A trailing slash marks an explicit directory (client-side) route."""
    return request_path.endswith("/")


def final_segment(key: str) -> str:
    """Last `/`-separated segment of a key (empty for a trailing slash)."""
    return key.rpartition("/")[2]
