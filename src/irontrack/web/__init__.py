"""JSON API for IronTrack."""

from .app import create_app

__all__ = ["create_app"]
