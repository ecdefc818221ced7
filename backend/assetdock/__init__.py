"""
AssetDock Backend - Application Package Initializer
===================================================

What: Marks the `assetdock` directory as a Python package.
Who:  Used by uvicorn (`assetdock.main:app`), pytest and the console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (HTTP Layer)       │  ← status codes, headers, app.state
    ├─────────────────────────────────────┤
    │    Services (Resolution Logic)      │  ← normalizer, resolver, builder
    ├─────────────────────────────────────┤
    │      Asset Registry (Data)          │  ← immutable key → bytes table
    ├─────────────────────────────────────┤
    │   Bundle Loader (Startup only)      │  ← reads the built admin UI once
    └─────────────────────────────────────┘

    Only the bundle loader touches the filesystem, and only before the
    first request is served. Everything below the routes is pure.
"""

__version__ = "1.0.0"
