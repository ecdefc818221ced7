"""
AssetDock Backend - Admin UI Route Handlers
=============================================

What:  Serves the embedded single-page admin interface.
How:   Each handler resolves the path against the shared AssetResolver and
       passes the outcome to the response builder. No handler touches the
       filesystem.

Route Inventory (URL prefix derived from the asset namespace, "/admin" by default):
    GET /admin             → root document
    GET /admin/            → root document
    GET /admin/{path}      → exact asset, SPA fallback, 404 or 503

HEAD is answered for every route with the same headers and no body.
"""

from fastapi import APIRouter, Depends
from starlette.responses import Response

from assetdock.routes.dependencies import get_cache_max_age, get_resolver
from assetdock.services.resolver import AssetResolver
from assetdock.services.response_builder import build_response


def create_router(url_prefix: str = "/admin") -> APIRouter:
    """Build the admin UI router mounted at `url_prefix`."""
    url_prefix = "/" + url_prefix.strip("/")
    router = APIRouter(tags=["Admin UI"], include_in_schema=False)

    @router.api_route(url_prefix, methods=["GET", "HEAD"])
    @router.api_route(f"{url_prefix}/", methods=["GET", "HEAD"])
    async def serve_admin_root(
        resolver: AssetResolver = Depends(get_resolver),
        cache_max_age: int = Depends(get_cache_max_age),
    ) -> Response:
        """Serve the SPA root document (or the bundle-unavailable answer)."""
        outcome = resolver.resolve_request("")
        return build_response(outcome, cache_max_age)

    @router.api_route(f"{url_prefix}/{{path:path}}", methods=["GET", "HEAD"])
    async def serve_admin_asset(
        path: str,
        resolver: AssetResolver = Depends(get_resolver),
        cache_max_age: int = Depends(get_cache_max_age),
    ) -> Response:
        """Serve a bundled asset, or the root document for client-side routes."""
        outcome = resolver.resolve_request(path)
        return build_response(outcome, cache_max_age)

    return router
