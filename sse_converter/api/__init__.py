"""HTTP adapter for the converter."""

from .app import create_app

__all__ = ["create_app"]
