"""
AssetDock Backend - Pydantic Response Schemas
===============================================

What:  JSON contracts of the health and introspection endpoints.
How:   FastAPI uses these models to serialize responses and generate the
       OpenAPI document. Asset bodies themselves are raw bytes, not JSON.
"""

from typing import Optional

from pydantic import BaseModel, Field


class EmbeddedAssetsHealthResponse(BaseModel):
    """
    Returned by GET /api/embedded/health.

    HTTP 200 with status "available" when the root document resolves,
    HTTP 503 with status "unavailable" otherwise.
    """
    status: str = Field(description="available or unavailable")
    message: str = Field(description="Human-readable summary for operators")
    root_document: str = Field(description="Registry key of the SPA root document")
    asset_count: int = Field(description="Number of assets in the registry")


class HealthResponse(BaseModel):
    """Process liveness, returned by GET /health."""
    status: str = Field(description="Overall service status: healthy or degraded")
    version: str = Field(description="Application version")
    admin_ui: str = Field(description="Admin UI bundle: available, unavailable, disabled")
    uptime_seconds: float = Field(description="Seconds since service started")


class ErrorResponse(BaseModel):
    """
    Standardized JSON error body for unexpected failures.

    Example:
        {
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again or contact support.",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
