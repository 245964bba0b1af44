# src/threadline/records.py
"""Plain data records handed between repositories, services and the API.

Repositories translate ORM rows into these frozen records so that service
code never holds a live session-bound object graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

TEXT_SNIPPET_LENGTH = 70


@dataclass(frozen=True)
class UserRecord:
    """Account fields safe to hand out; the password hash never leaves the repository."""

    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PostRecord:
    """A post with its creator summary and the viewer's vote, if any."""

    id: int
    title: str
    text: str
    score: int
    creator_id: int
    created_at: datetime
    updated_at: datetime
    creator: UserRecord
    vote_status: int | None = None

    @property
    def text_snippet(self) -> str:
        return self.text[:TEXT_SNIPPET_LENGTH]


@dataclass(frozen=True)
class FeedPage:
    """One page of the reverse-chronological feed."""

    posts: list[PostRecord]
    has_more: bool
    next_cursor: str | None = None
