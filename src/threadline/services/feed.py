"""Reverse-chronological feed with keyset pagination.

Pages are cut on `(created_at, id)` rather than by offset, so posts
inserted while a client is paging never shift or repeat rows it has
already seen. One extra row is fetched to tell whether more pages remain.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from threadline.core.errors import ValidationError
from threadline.core.settings import settings
from threadline.db.time import from_epoch_ms, to_epoch_ms
from threadline.records import FeedPage, PostRecord
from threadline.services.visibility import redact

_CURSOR_RE = re.compile(r"^(\d{1,15})(?::(\d{1,18}))?$")


class FeedSource(Protocol):
    def fetch_page(
        self,
        *,
        limit: int,
        before: tuple[datetime, int | None] | None = None,
        viewer_id: int | None = None,
    ) -> list[PostRecord]: ...


@dataclass(frozen=True)
class Cursor:
    """Position after the last post of a page.

    Encoded as `"<epoch_ms>"` or `"<epoch_ms>:<post_id>"`.
    """

    created_at_ms: int
    post_id: int | None = None

    @classmethod
    def after(cls, post: PostRecord) -> Cursor:
        return cls(created_at_ms=to_epoch_ms(post.created_at), post_id=post.id)

    @classmethod
    def parse(cls, token: str) -> Cursor:
        """Decode a cursor token.

        Raises:
            ValidationError: If the token is not a well-formed cursor.
        """
        match = _CURSOR_RE.match(token.strip())
        if match is None:
            raise ValidationError.single("cursor", "malformed cursor")
        created_at_ms = int(match.group(1))
        post_id = int(match.group(2)) if match.group(2) is not None else None
        try:
            from_epoch_ms(created_at_ms)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValidationError.single("cursor", "cursor timestamp out of range") from exc
        return cls(created_at_ms=created_at_ms, post_id=post_id)

    def encode(self) -> str:
        if self.post_id is None:
            return str(self.created_at_ms)
        return f"{self.created_at_ms}:{self.post_id}"

    def boundary(self) -> tuple[datetime, int | None]:
        return from_epoch_ms(self.created_at_ms), self.post_id


def clamp_limit(limit: int, max_limit: int | None = None) -> int:
    """Bound a requested page size to `[1, max_limit]`."""
    ceiling = max_limit if max_limit is not None else settings.feed_max_limit
    return max(1, min(limit, ceiling))


def list_posts(
    source: FeedSource,
    *,
    limit: int,
    cursor: str | None = None,
    viewer_id: int | None = None,
    max_limit: int | None = None,
) -> FeedPage:
    """Return one page of posts, newest first, redacted for the viewer.

    Args:
        source: Where posts are read from.
        limit: Requested page size; clamped to the configured maximum.
        cursor: Token from a previous page (`next_cursor`), or the epoch
            milliseconds of the last post seen. None starts at the top.
        viewer_id: Signed-in user, whose own votes are attached.
        max_limit: Override for the configured page-size ceiling.

    Raises:
        ValidationError: If `cursor` is malformed.
    """
    real_limit = clamp_limit(limit, max_limit)
    before = Cursor.parse(cursor).boundary() if cursor else None

    rows = source.fetch_page(limit=real_limit + 1, before=before, viewer_id=viewer_id)
    has_more = len(rows) > real_limit
    posts = [redact(post, viewer_id) for post in rows[:real_limit]]
    next_cursor = Cursor.after(posts[-1]).encode() if posts else None
    return FeedPage(posts=posts, has_more=has_more, next_cursor=next_cursor)
