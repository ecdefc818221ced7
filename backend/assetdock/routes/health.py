"""
AssetDock Backend - Health Check Route
========================================

What:  Liveness endpoint for Docker health checks and load balancer probes.
How:   Reports the process as up, with version, uptime and the state of the
       admin UI bundle.

Status levels:
    - healthy:   process up, bundle available (or UI routes disabled)
    - degraded:  process up, bundle missing; the API still works (HTTP 200)

Readiness for serving the admin UI is answered by /api/embedded/health,
which returns 503 when the bundle is missing.
"""

import time

from fastapi import APIRouter, Request

from assetdock import __version__
from assetdock.schemas.assets import ErrorResponse, HealthResponse

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    state = request.app.state
    if getattr(state, "api_only", False):
        admin_ui = "disabled"
    elif state.resolver.is_available():
        admin_ui = "available"
    else:
        admin_ui = "unavailable"

    return HealthResponse(
        status="degraded" if admin_ui == "unavailable" else "healthy",
        version=__version__,
        admin_ui=admin_ui,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
