# src/threadline/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .posts import router as posts_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "posts_router",
    "votes_router",
    "users_router",
]
