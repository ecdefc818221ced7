"""
AssetDock Backend - Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, middleware and routes.
When:  Loaded once at module import time; validated before app starts.

The asset namespace, the API-route prefixes that never receive SPA fallback,
and the bundle include/exclude globs are configuration inputs. The
resolution engine receives them as plain values and never reads settings
itself, so tests can build resolvers with any namespace.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development. Attributes are
    grouped by concern for readability.
    """

    # ── Asset Bundle ──────────────────────────────────────────────────────
    # What: Directory holding the built admin UI (e.g. `admin-ui/dist`)
    # Read once during startup; never dereferenced at request time.
    asset_dir: str = Field(default="./admin-ui/dist")

    # What: Reserved key prefix that separates bundled UI assets from API routes
    # Format: Must end with "/" (e.g. "admin/")
    asset_namespace: str = Field(default="admin/")

    # What: SPA root document, relative to the namespace
    root_document: str = Field(default="index.html")

    # What: Comma-separated prefixes of backend API routes
    # Keys under these prefixes never fall back to the root document
    api_prefixes: str = Field(default="api/")

    # What: Comma-separated glob patterns selecting bundle files
    # Defaults mirror the file types the admin UI build emits
    asset_include: str = Field(
        default="*.html,*.js,*.css,*.ico,*.png,*.svg,*.woff,*.woff2,*.ttf,*.eot"
    )
    # Source maps stay out of production bundles
    asset_exclude: str = Field(default="*.map")

    # What: Max-age (seconds) of the immutable Cache-Control policy
    # Default: one year, the conventional ceiling for content-addressed files
    asset_cache_max_age: int = Field(default=31_536_000, ge=0, le=63_072_000)

    # What: Serve only the API surface (no admin UI routes)
    api_only: bool = Field(default=False)

    # ── Security Headers ──────────────────────────────────────────────────
    # Valid: default, production, development, disabled
    security_headers_profile: str = Field(default="default")

    # ── Compression ───────────────────────────────────────────────────────
    gzip_minimum_size: int = Field(default=1024, ge=0, le=10_485_760)
    gzip_compress_level: int = Field(default=6, ge=1, le=9)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (parsed by the property below)
    cors_origins: str = Field(default="http://localhost:5173")

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("asset_namespace")
    @classmethod
    def validate_asset_namespace(cls, v: str) -> str:
        """Namespace keys look like `admin/...`: no leading slash, one trailing slash."""
        stripped = v.strip().strip("/")
        if not stripped:
            raise ValueError("asset_namespace must not be empty")
        return f"{stripped}/"

    @field_validator("security_headers_profile")
    @classmethod
    def validate_security_headers_profile(cls, v: str) -> str:
        valid = {"default", "production", "development", "disabled"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(
                f"Invalid security_headers_profile '{v}'. Must be one of: {valid}"
            )
        return lower

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return _split_csv(self.cors_origins)

    @property
    def api_prefix_list(self) -> List[str]:
        return _split_csv(self.api_prefixes)

    @property
    def asset_include_list(self) -> List[str]:
        return _split_csv(self.asset_include)

    @property
    def asset_exclude_list(self) -> List[str]:
        return _split_csv(self.asset_exclude)

    @property
    def root_document_key(self) -> str:
        """Registry key of the SPA root document, e.g. `admin/index.html`."""
        return f"{self.asset_namespace}{self.root_document.lstrip('/')}"


# Singleton instance, imported throughout the application
settings = Settings()
