"""API routers module."""

from . import admin, auth, growth, health, revenue

__all__ = [
    "admin",
    "auth",
    "growth",
    "health",
    "revenue",
]
