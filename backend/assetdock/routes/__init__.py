# Routes package init
"""
AssetDock Backend - HTTP Routes Package
=========================================

Route Inventory:
    - admin_ui.py:  GET /admin, /admin/, /admin/{path}   (embedded SPA)
    - embedded.py:  GET /api/embedded/health            (bundle readiness)
                    GET /api/embedded/assets            (asset key listing)
    - health.py:    GET /health                         (process liveness)

Routes stay thin: they fetch the shared resolver from app.state, call it,
and hand the outcome to the response builder.
"""
