"""API routers module."""

from . import entities, matches

__all__ = ["entities", "matches"]
