"""HTTP API."""

from .app import app, get_catalog, get_pipeline

__all__ = ["app", "get_catalog", "get_pipeline"]
