# src/threadline/services/__init__.py
"""Business logic services for the Threadline application."""

from .email import EmailSender
from .feed import Cursor, list_posts
from .session_store import KeyValueStore, PasswordResetTokens, SessionService
from .visibility import redact, redact_user
from .vote_ledger import apply_vote, cast_vote

__all__ = [
    "Cursor",
    "EmailSender",
    "KeyValueStore",
    "PasswordResetTokens",
    "SessionService",
    "apply_vote",
    "cast_vote",
    "list_posts",
    "redact",
    "redact_user",
]
