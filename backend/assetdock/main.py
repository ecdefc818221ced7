"""
AssetDock Backend - FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn assetdock.main:app) or the `assetdock`
       console script.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────┐ ┌─────────┐ ┌──────────┐ ┌──────┐ ┌──────┐   │
    │  │ Req ID │→│ Logging │→│ Security │→│ GZip │→│ CORS │   │
    │  └────────┘ └─────────┘ └──────────┘ └──────┘ └──────┘   │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────┐ ┌─────────────────────┐ ┌───────────┐  │
    │  │ GET /admin/* │ │ GET /api/embedded/* │ │ GET       │  │
    │  │ (SPA assets) │ │ (health, listing)   │ │ /health   │  │
    │  └──────────────┘ └─────────────────────┘ └───────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Load the admin UI bundle into an immutable AssetRegistry
       (skipped when a registry was passed to create_app)
    3. Build the AssetResolver and store it on app.state
    4. Log startup complete

    Shutdown:
    1. Log shutdown complete (no pooled resources to release)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from assetdock import __version__
from assetdock.config import Settings, settings as default_settings
from assetdock.exceptions import AssetDockError, BundleLoadError, RegistryError
from assetdock.middleware.logging import RequestLoggingMiddleware
from assetdock.middleware.request_id import RequestIDMiddleware, request_id_var
from assetdock.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)
from assetdock.routes import admin_ui, embedded, health
from assetdock.schemas.assets import ErrorResponse
from assetdock.services.bundle_loader import load_bundle
from assetdock.services.registry import AssetRegistry
from assetdock.services.resolver import AssetResolver

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Called once during app startup, before the bundle is loaded.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application State
# ══════════════════════════════════════════════════════════════════════════

def install_registry(app: FastAPI, registry: AssetRegistry, app_settings: Settings) -> AssetResolver:
    """Bind the immutable registry to a resolver and publish it on app.state."""
    resolver = AssetResolver(
        registry,
        namespace=app_settings.asset_namespace,
        root_document=app_settings.root_document,
        api_prefixes=app_settings.api_prefix_list,
    )
    app.state.resolver = resolver
    app.state.cache_max_age = app_settings.asset_cache_max_age
    app.state.api_only = app_settings.api_only
    return resolver


async def load_registry(app_settings: Settings) -> AssetRegistry:
    """
    Load the bundle configured in `app_settings`.

    A bundle that fails to load leaves the service running with an empty
    registry so health checks can report the problem.
    """
    if app_settings.api_only:
        logger.info("API-only mode: admin UI bundle not loaded")
        return AssetRegistry.empty()
    try:
        registry = await load_bundle(
            app_settings.asset_dir,
            namespace=app_settings.asset_namespace,
            include=app_settings.asset_include_list,
            exclude=app_settings.asset_exclude_list,
        )
    except (BundleLoadError, RegistryError) as e:
        logger.error("Admin UI bundle failed to load: %s | Context: %s", e.message, e.context)
        return AssetRegistry.empty()

    if len(registry) and app_settings.root_document_key not in registry:
        logger.warning(
            "Bundle in %s has %d assets but no %s; client-side routes will answer 503",
            app_settings.asset_dir,
            len(registry),
            app_settings.root_document_key,
        )
    return registry


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        AssetDockError (base)  → 500 Internal Server Error
        Exception (fallback)   → 500 Internal Server Error

    Missing assets never reach these handlers; they are ordinary 404/503
    answers built by the response builder. Anything caught here is a defect
    and only fails the current request.
    """

    @app.exception_handler(AssetDockError)
    async def handle_assetdock_error(request: Request, exc: AssetDockError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="server_error",
                message=exc.message,
                request_id=rid,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: the stack trace is logged, never returned."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="internal_server_error",
                message="An unexpected error occurred. Please try again or contact support.",
                request_id=rid,
            ).model_dump(exclude_none=True),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    registry: Optional[AssetRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use instead of the module singleton.
        registry:     Pre-built registry. When given, it is installed
                      immediately and the lifespan hook does not read the
                      bundle directory (used by tests and embedding hosts).

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or default_settings

    # Fail fast on inconsistent security header settings
    security_config = SecurityHeadersConfig.from_profile(app_settings.security_headers_profile)
    security_config.validate_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(app_settings.log_level)
        logger.info("=" * 60)
        logger.info("AssetDock Backend %s starting up...", __version__)

        if registry is None:
            resolver = install_registry(app, await load_registry(app_settings), app_settings)
        else:
            resolver = app.state.resolver

        if not app_settings.api_only:
            if resolver.is_available():
                logger.info(
                    "Admin UI: %d assets, served at http://%s:%d/%s",
                    len(resolver.registry),
                    app_settings.backend_host,
                    app_settings.backend_port,
                    app_settings.asset_namespace,
                )
            else:
                logger.warning(
                    "Admin UI not available: %s is missing. Build the admin UI "
                    "and set ASSET_DIR to its output directory.",
                    resolver.root_key,
                )
        logger.info("=" * 60)

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("AssetDock Backend shutting down...")
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="AssetDock API",
        description=(
            "Administrative backend serving an embedded single-page admin "
            "interface from an immutable, startup-loaded asset bundle."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if registry is not None:
        install_registry(app, registry, app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(
        GZipMiddleware,
        minimum_size=app_settings.gzip_minimum_size,
        compresslevel=app_settings.gzip_compress_level,
    )

    if security_config.enabled:
        app.add_middleware(SecurityHeadersMiddleware, config=security_config)

    url_prefix = "/" + app_settings.asset_namespace.rstrip("/")
    app.add_middleware(RequestLoggingMiddleware, ui_prefix=url_prefix)

    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(embedded.router)
    if not app_settings.api_only:
        app.include_router(admin_ui.create_router(url_prefix))

    return app


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "assetdock.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `assetdock.main:app` to be importable
app = create_app()
