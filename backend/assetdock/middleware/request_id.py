"""
AssetDock Backend - Request ID Middleware
===========================================

What:  Tags every request with a correlation ID and echoes it as X-Request-ID.
How:   A client-supplied ID is reused only if it is a short token of safe
       characters; anything else (CR/LF, spaces, oversized values) is
       replaced by a fresh 8-character UUID prefix so it cannot forge lines
       in the access log. The ID is published in a ContextVar; each request
       runs in its own task, so concurrent requests never see each other's ID.
When:  Outermost application middleware, so the access log and the
       exception handlers both see the ID.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]+$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(candidate: str) -> bool:
    """True if a client-supplied ID can be logged and echoed verbatim."""
    return (
        0 < len(candidate) <= MAX_REQUEST_ID_LENGTH
        and _SAFE_REQUEST_ID.match(candidate) is not None
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = incoming if accept_request_id(incoming) else new_request_id()

        request_id_var.set(request_id)
        request.state.request_id = request_id
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
