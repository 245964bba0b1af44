# src/threadline/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import auth_router, posts_router, users_router, votes_router

__all__ = [
    "auth_router",
    "posts_router",
    "votes_router",
    "users_router",
]
