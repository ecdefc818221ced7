# Middleware package init
"""
AssetDock Backend - Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Security Headers] → [GZip] → [CORS] → Route

    The order is reversed for responses, so the access log sees the final
    status code and the request ID header is added last.
"""
