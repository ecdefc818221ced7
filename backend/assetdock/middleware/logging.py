"""
AssetDock Backend - Request Logging Middleware
================================================

What:  One access log line per HTTP request: method, path, status, duration.
How:   Times the downstream call and picks the log level from the status.
When:  After RequestIDMiddleware (uses the request ID for correlation).

Level policy:
    5xx                      → ERROR
    404 under the UI prefix  → INFO     (a missing asset is a routine answer)
    other 4xx                → WARNING
    2xx / 3xx                → INFO

Not logged: request bodies and headers. `/health` is skipped entirely
because probes hit it every few seconds.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from assetdock.middleware.request_id import request_id_var

logger = logging.getLogger("assetdock.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Args:
        ui_prefix: URL prefix of the admin UI (e.g. "/admin"); 404s below it
                   are logged at INFO.
    """

    SKIPPED_PATHS = {"/health"}

    def __init__(self, app: ASGIApp, ui_prefix: str = "/admin"):
        super().__init__(app)
        self.ui_prefix = ui_prefix.rstrip("/")

    def _level_for(self, path: str, status: int) -> int:
        if status >= 500:
            return logging.ERROR
        if status == 404 and (path == self.ui_prefix or path.startswith(self.ui_prefix + "/")):
            return logging.INFO
        if status >= 400:
            return logging.WARNING
        return logging.INFO

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")

        logger.log(
            self._level_for(path, status),
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
