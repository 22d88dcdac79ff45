"""Command-line interface for chatline."""

from .app import app

__all__ = ["app"]
