"""
AssetDock Backend - Response Builder
======================================

What:  Turns a ResolutionOutcome into a Starlette response.

Response matrix:
    ┌────────────────────────┬────────┬────────────────────────────────────────────┐
    │ Outcome                │ Status │ Cache-Control                              │
    ├────────────────────────┼────────┼────────────────────────────────────────────┤
    │ HIT (static asset)     │ 200    │ public, max-age=<max_age>, immutable       │
    │ HIT (root document)    │ 200    │ no-cache                                   │
    │ FALLBACK               │ 200    │ no-cache  (always text/html; charset=utf-8)│
    │ MISS / not_found       │ 404    │ no-store  (plain text)                     │
    │ MISS / bundle missing  │ 503    │ no-store  (plain text, remediation hint)   │
    └────────────────────────┴────────┴────────────────────────────────────────────┘

    Every response carries `X-Content-Type-Options: nosniff`.
"""

from typing import Dict

from starlette.responses import PlainTextResponse, Response

from assetdock.services.resolver import CachePolicy, MissReason, ResolutionOutcome

NOSNIFF_HEADERS = {"X-Content-Type-Options": "nosniff"}

BUNDLE_UNAVAILABLE_MESSAGE = (
    "Admin interface not available. The UI bundle was not built into this "
    "deployment: build the admin UI and point ASSET_DIR at its output "
    "directory, then restart the server."
)


def cache_control_value(policy: CachePolicy, max_age: int) -> str:
    if policy is CachePolicy.IMMUTABLE:
        return f"public, max-age={max_age}, immutable"
    return "no-cache"


def not_found_message(key: str) -> str:
    return f"Asset not found: {key}"


def build_response(outcome: ResolutionOutcome, cache_max_age: int = 31_536_000) -> Response:
    """Render `outcome` with the caching and security headers it calls for."""
    if outcome.asset is not None:
        asset = outcome.asset
        headers: Dict[str, str] = {
            **NOSNIFF_HEADERS,
            "Cache-Control": cache_control_value(asset.cache_policy, cache_max_age),
        }
        return Response(
            content=asset.payload,
            status_code=200,
            headers=headers,
            media_type=asset.mime_type,
        )

    if outcome.miss_reason is MissReason.BUNDLE_UNAVAILABLE:
        return PlainTextResponse(
            BUNDLE_UNAVAILABLE_MESSAGE,
            status_code=503,
            headers={**NOSNIFF_HEADERS, "Cache-Control": "no-store"},
        )

    return PlainTextResponse(
        not_found_message(outcome.key),
        status_code=404,
        headers={**NOSNIFF_HEADERS, "Cache-Control": "no-store"},
    )
