"""HTTP surface: OCR proxy and JSON journal API."""

from .app import create_app

__all__ = ["create_app"]
