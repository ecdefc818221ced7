"""Pydantic schemas for assetdock."""
