# Services package init
"""
AssetDock Backend - Services Layer
====================================

What:  The embedded asset core, free of HTTP routing concerns.

Service Inventory:
    - mime.py:             extension → Content-Type
    - registry.py:         immutable key → Asset table
    - normalizer.py:       request path → registry key
    - resolver.py:         HIT / FALLBACK / MISS decision
    - response_builder.py: outcome → Starlette response with headers
    - bundle_loader.py:    built UI directory → registry (startup only)

Data flow:
    request path → normalizer → resolver (registry + mime) → response_builder
"""
