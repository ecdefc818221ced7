"""
AssetDock Backend - Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the few real failure modes.
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) turn anything that escapes
       a route into a structured JSON 500 response.
Who:   Raised by the registry, the bundle loader and the security header
       configuration.

Exception Hierarchy:
    AssetDockError (base)
    ├── RegistryError        → startup defect (duplicate asset keys)
    ├── BundleLoadError      → startup I/O failure reading the bundle
    └── ConfigurationError   → invalid security header configuration

A missing asset is NOT an exception. Resolution returns a MISS outcome and
the response builder renders it as 404 (or 503 when the whole bundle is
absent). Those are routine answers, not failures.
"""

from typing import Any, Dict, Optional


class AssetDockError(Exception):
    """
    Base exception for all AssetDock application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class RegistryError(AssetDockError):
    """
    Raised when the asset registry cannot be built from the given entries.

    When:    Two entries share a key, or a key is empty.
    Effect:  Startup defect in the packaging step; the registry is never
             partially built.
    """

    def __init__(
        self,
        message: str = "Asset registry could not be built",
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if key is not None:
            ctx["key"] = key
        super().__init__(message=message, context=ctx)
        self.key = key


class BundleLoadError(AssetDockError):
    """
    Raised when a bundle file exists but cannot be read.

    When:    Permission denied or I/O error while loading the bundle at startup.
    Effect:  The lifespan hook logs it and starts with an empty registry, so
             the embedded health check reports the interface as unavailable.
    """

    def __init__(
        self,
        message: str = "Failed to load the admin interface bundle",
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if path is not None:
            ctx["path"] = path
        super().__init__(message=message, context=ctx)
        self.path = path


class ConfigurationError(AssetDockError):
    """
    Raised when the security header configuration is inconsistent.

    Example: HSTS enabled with max_age 0, or CSP enabled with an empty policy.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        setting: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if setting:
            ctx["setting"] = setting
        super().__init__(message=message, context=ctx)
        self.setting = setting
