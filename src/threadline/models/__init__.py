# src/threadline/models/__init__.py
"""SQLAlchemy models for the Threadline application."""

from .post import Post
from .user import User
from .vote import Vote

__all__ = ["Post", "User", "Vote"]
