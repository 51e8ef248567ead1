"""FastAPI application serving the JSON and plain-text endpoints."""

from .app import create_app

__all__ = ["create_app"]
