"""
AssetDock Backend - HTTP Route Integration Tests
==================================================

What:  End-to-end requests through the FastAPI app (middleware included).
How:   HTTPX AsyncClient over ASGITransport; the registry is injected through
       create_app so no bundle directory is needed.

What we test:
    ✅ /admin, /admin/ and client-side routes render the root document
    ✅ Concrete assets with their MIME type and cache headers
    ✅ Missing files 404, missing bundle 503
    ✅ /api/embedded/health and /api/embedded/assets
    ✅ /health liveness, request IDs, security headers, api_only mode
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from assetdock.config import Settings
from assetdock.exceptions import RegistryError
from assetdock.main import create_app, load_registry
from assetdock.routes.dependencies import get_resolver
from assetdock.services.registry import AssetRegistry

from conftest import APP_JS, INDEX_HTML


class TestAdminUiRoutes:
    """GET /admin/* through the full middleware chain."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/admin", "/admin/"])
    async def test_root(self, test_client, path):
        response = await test_client.get(path)
        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert response.headers["cache-control"] == "no-cache"
        assert response.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_script_asset(self, test_client):
        response = await test_client.get("/admin/app.js")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/javascript; charset=utf-8"
        assert "immutable" in response.headers["cache-control"]
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.content == APP_JS

    @pytest.mark.asyncio
    async def test_client_route(self, test_client):
        response = await test_client.get("/admin/dashboard")
        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert response.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_nested_client_route_with_trailing_slash(self, test_client):
        response = await test_client.get("/admin/records/users/")
        assert response.status_code == 200
        assert response.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_missing_file(self, test_client):
        response = await test_client.get("/admin/missing.png")
        assert response.status_code == 404
        assert response.text == "Asset not found: admin/missing.png"
        assert response.headers["x-content-type-options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_api_route_under_namespace_is_not_html(self, test_client):
        response = await test_client.get("/admin/api/users")
        assert response.status_code == 404
        assert not response.headers["content-type"].startswith("text/html")

    @pytest.mark.asyncio
    async def test_head(self, test_client):
        response = await test_client.head("/admin/app.css")
        assert response.status_code == 200
        assert response.headers["content-type"] == "text/css; charset=utf-8"

    @pytest.mark.asyncio
    async def test_bundle_missing(self, unavailable_client):
        response = await unavailable_client.get("/admin/dashboard")
        assert response.status_code == 503
        assert "Admin interface not available" in response.text

        root = await unavailable_client.get("/admin")
        assert root.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_file_without_bundle_is_404(self, unavailable_client):
        response = await unavailable_client.get("/admin/missing.png")
        assert response.status_code == 404
        assert response.text == "Asset not found: admin/missing.png"

    @pytest.mark.asyncio
    async def test_route_sharing_api_prefix_name_falls_back(self, test_client):
        response = await test_client.get("/admin/apiary")
        assert response.status_code == 200
        assert response.content == INDEX_HTML


class TestEmbeddedRoutes:
    """Bundle readiness and introspection."""

    @pytest.mark.asyncio
    async def test_health_available(self, test_client):
        response = await test_client.get("/api/embedded/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "available"
        assert body["root_document"] == "admin/index.html"
        assert body["asset_count"] == 3

    @pytest.mark.asyncio
    async def test_health_unavailable(self, unavailable_client):
        response = await unavailable_client.get("/api/embedded/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"

    @pytest.mark.asyncio
    async def test_list_assets(self, test_client):
        response = await test_client.get("/api/embedded/assets")
        assert response.status_code == 200
        assert response.json() == ["admin/app.css", "admin/app.js", "admin/index.html"]


class TestServiceRoutes:
    """Liveness and cross-cutting middleware."""

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["admin_ui"] == "available"

    @pytest.mark.asyncio
    async def test_health_degraded_without_bundle(self, unavailable_client):
        body = (await unavailable_client.get("/health")).json()
        assert body["status"] == "degraded"
        assert body["admin_ui"] == "unavailable"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/admin/app.js")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_propagated(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["x-request-id"] == "trace-123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "header",
        ["bad id", "forged;line", "x" * 65],
    )
    async def test_unsafe_request_id_replaced(self, test_client, header):
        response = await test_client.get("/health", headers={"X-Request-ID": header})
        assert response.headers["x-request-id"] != header
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_handled_error_uses_error_schema(self, registry, test_settings):
        def broken_resolver():
            raise RegistryError(message="Registry not installed", key="admin/index.html")

        app = create_app(test_settings, registry=registry)
        app.dependency_overrides[get_resolver] = broken_resolver
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/embedded/assets", headers={"X-Request-ID": "err-1"})
        assert response.status_code == 500
        assert response.json() == {
            "error": "server_error",
            "message": "Registry not installed",
            "request_id": "err-1",
        }

    @pytest.mark.asyncio
    async def test_openapi_documents_error_schema(self, test_client):
        schema = (await test_client.get("/openapi.json")).json()
        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"]["/api/embedded/assets"]["get"]["responses"]
        assert responses["500"]["content"]["application/json"]["schema"]["$ref"].endswith(
            "/ErrorResponse"
        )

    @pytest.mark.asyncio
    async def test_security_headers(self, test_client):
        response = await test_client.get("/admin/dashboard")
        assert response.headers["x-frame-options"] == "DENY"
        assert "strict-transport-security" in response.headers
        assert "content-security-policy" in response.headers

    @pytest.mark.asyncio
    async def test_security_headers_disabled(self, registry):
        app = create_app(
            Settings(log_level="WARNING", security_headers_profile="disabled"),
            registry=registry,
        )
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/admin/app.js")
        assert "x-frame-options" not in response.headers
        assert response.headers["x-content-type-options"] == "nosniff"


class TestAppConfiguration:
    """create_app variations."""

    @pytest.mark.asyncio
    async def test_api_only_mode(self, registry):
        app = create_app(Settings(log_level="WARNING", api_only=True), registry=registry)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            ui = await client.get("/admin/dashboard")
            health = await client.get("/health")
        assert ui.status_code == 404
        assert health.json()["admin_ui"] == "disabled"

    @pytest.mark.asyncio
    async def test_custom_namespace(self):
        registry = AssetRegistry([("console/index.html", INDEX_HTML)])
        app = create_app(
            Settings(log_level="WARNING", asset_namespace="console"),
            registry=registry,
        )
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/console/settings")
        assert response.status_code == 200
        assert response.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_load_registry_from_directory(self, bundle_dir):
        registry = await load_registry(Settings(log_level="WARNING", asset_dir=str(bundle_dir)))
        assert registry.exists("admin/index.html")
        assert not registry.exists("admin/assets/index-4f2a1c.js.map")

    @pytest.mark.asyncio
    async def test_load_registry_api_only_skips_bundle(self, bundle_dir):
        registry = await load_registry(
            Settings(log_level="WARNING", asset_dir=str(bundle_dir), api_only=True)
        )
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_load_registry_warns_when_root_document_missing(self, bundle_dir, caplog):
        (bundle_dir / "index.html").unlink()
        app_settings = Settings(log_level="WARNING", asset_dir=str(bundle_dir))
        with caplog.at_level(logging.WARNING, logger="assetdock.main"):
            registry = await load_registry(app_settings)
        assert len(registry) == 3
        assert app_settings.root_document_key not in registry
        assert "admin/index.html" in caplog.text
