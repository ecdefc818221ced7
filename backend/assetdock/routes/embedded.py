"""
AssetDock Backend - Embedded Bundle Introspection Routes
==========================================================

What:  Operational endpoints for the embedded admin UI bundle.
Who:   Deployment tooling (readiness gates) and operators debugging a build.

Route Inventory:
    GET /api/embedded/health   → 200 when the root document resolves, else 503
    GET /api/embedded/assets   → JSON array of registry keys

The asset listing is for visibility only; it plays no part in resolution.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from assetdock.routes.dependencies import get_resolver
from assetdock.schemas.assets import EmbeddedAssetsHealthResponse, ErrorResponse
from assetdock.services.resolver import AssetResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/embedded", tags=["Embedded Assets"])


@router.get(
    "/health",
    response_model=EmbeddedAssetsHealthResponse,
    responses={
        503: {"description": "Bundle missing", "model": EmbeddedAssetsHealthResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Embedded admin UI availability",
)
async def embedded_assets_health(
    resolver: AssetResolver = Depends(get_resolver),
) -> JSONResponse:
    """
    Report whether the admin UI bundle is usable.

    Healthy iff the root document key is present. A 503 lets deployment
    tooling stop a rollout of a build that was never given its UI bundle.
    """
    available = resolver.is_available()
    body = EmbeddedAssetsHealthResponse(
        status="available" if available else "unavailable",
        message=(
            "Embedded admin assets are available"
            if available
            else "Embedded admin assets are not available"
        ),
        root_document=resolver.root_key,
        asset_count=len(resolver.registry),
    )
    if not available:
        logger.warning("Embedded asset health check: %s missing", resolver.root_key)
    return JSONResponse(
        status_code=200 if available else 503,
        content=body.model_dump(),
    )


@router.get(
    "/assets",
    response_model=List[str],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List embedded asset keys",
)
async def list_embedded_assets(
    resolver: AssetResolver = Depends(get_resolver),
) -> List[str]:
    return resolver.registry.list_keys()
