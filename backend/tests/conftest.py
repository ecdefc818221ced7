"""
AssetDock Backend - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── bundle_entries:      (key, bytes) pairs of a small built admin UI
    ├── registry:            AssetRegistry over bundle_entries
    ├── resolver:            AssetResolver over registry (namespace "admin/")
    ├── empty_resolver:      AssetResolver over an empty registry
    ├── bundle_dir:          on-disk dist/ directory for loader tests
    ├── test_settings:       Settings instance with quiet logging
    ├── test_client:         HTTPX AsyncClient against an app with the bundle
    └── unavailable_client:  HTTPX AsyncClient against an app without a bundle
"""

import os
import tempfile

# Set before any assetdock import so the module-level settings pick them up
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ASSET_DIR"] = tempfile.mkdtemp(prefix="assetdock_test_")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from assetdock.config import Settings
from assetdock.main import create_app
from assetdock.services.registry import AssetRegistry
from assetdock.services.resolver import AssetResolver

INDEX_HTML = b"<!doctype html><html><body><div id=\"root\"></div></body></html>"
APP_JS = b"console.log('admin');"
APP_CSS = b"body { margin: 0; }"


@pytest.fixture
def bundle_entries():
    """A minimal built admin UI: index.html, app.js, app.css."""
    return [
        ("admin/index.html", INDEX_HTML),
        ("admin/app.js", APP_JS),
        ("admin/app.css", APP_CSS),
    ]


@pytest.fixture
def registry(bundle_entries):
    return AssetRegistry(bundle_entries)


@pytest.fixture
def resolver(registry):
    return AssetResolver(registry, namespace="admin/", root_document="index.html", api_prefixes=["api/"])


@pytest.fixture
def empty_resolver():
    return AssetResolver(AssetRegistry.empty(), namespace="admin/", api_prefixes=["api/"])


@pytest.fixture
def bundle_dir(tmp_path):
    """
    A built admin UI directory as the frontend build would leave it.

    Includes a source map and a text file, both of which the default
    include/exclude globs leave out of the registry.
    """
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_bytes(INDEX_HTML)
    (dist / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    (dist / "assets" / "index-4f2a1c.js").write_bytes(APP_JS)
    (dist / "assets" / "index-4f2a1c.js.map").write_bytes(b"{}")
    (dist / "assets" / "index-9b7e0d.css").write_bytes(APP_CSS)
    (dist / "notes.txt").write_bytes(b"not part of the bundle")
    return dist


@pytest.fixture
def test_settings():
    return Settings(log_level="WARNING", asset_namespace="admin/", api_prefixes="api/")


@pytest_asyncio.fixture
async def test_client(test_settings, registry):
    """
    HTTPX AsyncClient talking to an app with the sample registry installed.

    Usage:
        async def test_app_js(test_client):
            response = await test_client.get("/admin/app.js")
            assert response.status_code == 200
    """
    app = create_app(test_settings, registry=registry)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def unavailable_client(test_settings):
    """HTTPX AsyncClient against an app whose bundle was never built."""
    app = create_app(test_settings, registry=AssetRegistry.empty())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
