# src/threadline/repositories/__init__.py
"""Data access layer translating between ORM rows and plain records."""

from .post_repo import PostRepository
from .user_repo import UserRepository
from .vote_repo import VoteRepository

__all__ = ["PostRepository", "UserRepository", "VoteRepository"]
