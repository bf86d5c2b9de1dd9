"""HTTP API for the issue dashboard."""

from .app import create_app

__all__ = ["create_app"]
