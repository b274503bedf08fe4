"""API routers."""

from toolrank.routers import health, upvotes, favorites, tools, users, ops

__all__ = ["health", "upvotes", "favorites", "tools", "users", "ops"]
