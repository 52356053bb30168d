"""HTTP transport for the generator."""

from .app import app

__all__ = ["app"]
