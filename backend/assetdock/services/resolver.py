"""
AssetDock Backend - Asset Resolution Engine
=============================================

What:  Decides, for a registry key, between serving the exact asset, falling
       back to the SPA root document, or answering "not found".
How:   Ordered rules, first match wins:

       1. Exact match in the registry                → HIT
       2. Fallback eligibility:
            - the key is NOT under an API-route prefix, and
            - its final path segment has no ".", or the original request
              ended with "/" (explicit directory route)
       3. Eligible and the root document exists      → FALLBACK
       4. Anything else                              → MISS

       A MISS carries a reason: BUNDLE_UNAVAILABLE when the key was eligible
       for fallback but the root document is absent (the interface was never
       built), NOT_FOUND otherwise. API prefixes match whole segments:
       "api" covers `api` and `api/...` but not `apiary`.

Examples (namespace "admin/", API prefix "api/"):
    admin/app.js          present          → HIT
    admin/dashboard       absent           → FALLBACK (client-side route)
    admin/v2.0/page       absent           → FALLBACK (dot is not in the final segment)
    admin/missing.png     absent           → MISS / NOT_FOUND
    admin/page.           absent           → MISS / NOT_FOUND
    api/users             absent           → MISS / NOT_FOUND (never HTML)

The engine is pure: it holds references to immutable data and performs no
I/O, so one instance is shared by every concurrent request.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from assetdock.services.mime import HTML_MIME_TYPE, resolve_mime_type
from assetdock.services.normalizer import final_segment, is_directory_route, normalize_path
from assetdock.services.registry import Asset, AssetRegistry

logger = logging.getLogger(__name__)


class OutcomeKind(str, enum.Enum):
    HIT = "hit"
    FALLBACK = "fallback"
    MISS = "miss"


class MissReason(str, enum.Enum):
    NOT_FOUND = "not_found"
    BUNDLE_UNAVAILABLE = "bundle_unavailable"


class CachePolicy(str, enum.Enum):
    IMMUTABLE = "immutable"
    NO_CACHE = "no_cache"


@dataclass(frozen=True)
class ResolvedAsset:
    """
    Payload ready to be written to the client.

    `payload` is the registry's own bytes object; it is never copied.
    """

    payload: bytes
    mime_type: str
    cache_policy: CachePolicy
    is_fallback: bool


@dataclass(frozen=True)
class ResolutionOutcome:
    kind: OutcomeKind
    key: str
    asset: Optional[ResolvedAsset] = None
    miss_reason: Optional[MissReason] = None

    @property
    def is_hit(self) -> bool:
        return self.kind is OutcomeKind.HIT

    @property
    def is_fallback(self) -> bool:
        return self.kind is OutcomeKind.FALLBACK

    @property
    def is_miss(self) -> bool:
        return self.kind is OutcomeKind.MISS


class AssetResolver:
    """
    Resolution engine bound to one registry and one namespace.

    Args:
        registry:      The immutable asset table.
        namespace:     Reserved key prefix of bundled UI assets (e.g. "admin/").
        root_document: Root document name relative to the namespace.
        api_prefixes:  Route prefixes that must never receive SPA fallback.
                       Matched against the key and against the key with the
                       namespace stripped, so both `api/users` and
                       `admin/api/users` are excluded.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        namespace: str = "admin/",
        root_document: str = "index.html",
        api_prefixes: Iterable[str] = ("api/",),
    ):
        self.registry = registry
        self.namespace = namespace
        self.root_key = f"{namespace}{root_document.lstrip('/')}"
        # Stored bare ("api"); matched as a whole segment, never as a name prefix
        self.api_prefixes: Tuple[str, ...] = tuple(
            p.strip("/") for p in api_prefixes if p.strip("/")
        )

    # ── Availability ──────────────────────────────────────────────────────

    def is_available(self) -> bool:
        """True iff the root document is in the registry."""
        return self.registry.exists(self.root_key)

    # ── Resolution ────────────────────────────────────────────────────────

    def resolve_request(self, request_path: str) -> ResolutionOutcome:
        """Normalize a raw request path, then resolve it."""
        key = normalize_path(request_path, self.namespace)
        return self.resolve(key, directory_route=is_directory_route(request_path))

    def resolve(self, key: str, directory_route: bool = False) -> ResolutionOutcome:
        # Rule 1: exact match
        asset = self.registry.lookup(key)
        if asset is not None:
            return ResolutionOutcome(
                kind=OutcomeKind.HIT,
                key=key,
                asset=self._hit(asset),
            )

        # Rules 2 and 3: SPA fallback
        reason = MissReason.NOT_FOUND
        if not self.is_api_route(key) and self._fallback_eligible(key, directory_route):
            root = self.registry.lookup(self.root_key)
            if root is None:
                # Only client routes report the missing bundle; concrete files stay 404
                reason = MissReason.BUNDLE_UNAVAILABLE
            else:
                logger.debug("SPA fallback for %s", key)
                return ResolutionOutcome(
                    kind=OutcomeKind.FALLBACK,
                    key=key,
                    asset=ResolvedAsset(
                        payload=root.data,
                        mime_type=HTML_MIME_TYPE,
                        cache_policy=CachePolicy.NO_CACHE,
                        is_fallback=True,
                    ),
                )

        # Rule 4: miss
        logger.debug("Asset miss for %s (%s)", key, reason.value)
        return ResolutionOutcome(kind=OutcomeKind.MISS, key=key, miss_reason=reason)

    # ── Rules ─────────────────────────────────────────────────────────────

    def is_api_route(self, key: str) -> bool:
        relative = key[len(self.namespace):] if key.startswith(self.namespace) else key
        for bare in self.api_prefixes:
            for candidate in (key, relative):
                if candidate == bare or candidate.startswith(bare + "/"):
                    return True
        return False

    @staticmethod
    def _fallback_eligible(key: str, directory_route: bool) -> bool:
        # Segment-local check: `admin/v2.0/page` stays eligible
        return directory_route or "." not in final_segment(key)

    def _hit(self, asset: Asset) -> ResolvedAsset:
        # The root document drives client-side routing and must stay revalidated
        policy = CachePolicy.NO_CACHE if asset.key == self.root_key else CachePolicy.IMMUTABLE
        return ResolvedAsset(
            payload=asset.data,
            mime_type=resolve_mime_type(asset.key),
            cache_policy=policy,
            is_fallback=False,
        )
