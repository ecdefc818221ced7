"""
AssetDock Backend - Route Dependencies
========================================

What:  FastAPI dependencies that hand request handlers the shared,
       immutable resolver built during startup.
How:   The lifespan hook stores the resolver on `app.state`; handlers
       declare `resolver: AssetResolver = Depends(get_resolver)`.
"""

from fastapi import Request

from assetdock.services.resolver import AssetResolver


def get_resolver(request: Request) -> AssetResolver:
    return request.app.state.resolver


def get_cache_max_age(request: Request) -> int:
    return request.app.state.cache_max_age
