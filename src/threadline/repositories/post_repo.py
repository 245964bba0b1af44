"""Data access helpers for working with posts."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, delete, literal, or_, select
from sqlalchemy.orm import Session, joinedload

from threadline.models import Post, Vote
from threadline.records import PostRecord

from ._convert import post_to_record

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def _select_with_vote_status(self, viewer_id: int | None):  # type: ignore[no-untyped-def]
        if viewer_id is None:
            vote_status = literal(None)
        else:
            vote_status = (
                select(Vote.value)
                .where(Vote.post_id == Post.id, Vote.user_id == viewer_id)
                .correlate(Post)
                .scalar_subquery()
            )
        return (
            select(Post, vote_status.label("vote_status"))
            .options(joinedload(Post.creator))
            .execution_options(populate_existing=True)
        )

    def get(self, post_id: int, viewer_id: int | None = None) -> PostRecord | None:
        """Return a post with its creator and the viewer's vote, or None."""
        stmt = self._select_with_vote_status(viewer_id).where(Post.id == post_id)
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return post_to_record(row[0], row[1])

    def fetch_page(
        self,
        *,
        limit: int,
        before: tuple[datetime, int | None] | None = None,
        viewer_id: int | None = None,
    ) -> list[PostRecord]:
        """Return up to `limit` posts newest-first, strictly older than `before`.

        Args:
            limit: Maximum number of rows to fetch.
            before: Keyset boundary as `(created_at, post_id)`. With a None id
                only posts created strictly before the instant qualify; with
                an id, posts at the same instant and a smaller id do too.
            viewer_id: User whose vote is attached as `vote_status`.
        """
        stmt = self._select_with_vote_status(viewer_id)
        if before is not None:
            created_at, post_id = before
            if post_id is None:
                stmt = stmt.where(Post.created_at < created_at)
            else:
                stmt = stmt.where(
                    or_(
                        Post.created_at < created_at,
                        and_(Post.created_at == created_at, Post.id < post_id),
                    )
                )
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit)
        return [post_to_record(post, vote_status) for post, vote_status in self.session.execute(stmt)]

    def get_creator_id(self, post_id: int) -> int | None:
        """Return the id of the post's creator, or None if the post is absent."""
        return self.session.execute(
            select(Post.creator_id).where(Post.id == post_id)
        ).scalar_one_or_none()

    def create(
        self,
        *,
        title: str,
        text: str,
        creator_id: int,
        created_at: datetime | None = None,
    ) -> PostRecord:
        """Insert a new post with a zero score and return it."""
        post = Post(title=title, text=text, creator_id=creator_id, score=0)
        if created_at is not None:
            post.created_at = created_at
            post.updated_at = created_at
        self.session.add(post)
        self.session.flush()
        self.session.refresh(post)
        return post_to_record(post)

    def update(
        self,
        post_id: int,
        *,
        title: str | None = None,
        text: str | None = None,
    ) -> PostRecord | None:
        """Apply a partial edit; the score is never touched here."""
        post = self.session.get(Post, post_id)
        if post is None:
            return None
        if title is not None:
            post.title = title
        if text is not None:
            post.text = text
        self.session.flush()
        self.session.refresh(post)
        return post_to_record(post)

    def delete(self, post_id: int) -> bool:
        """Hard-delete a post; its votes go with it."""
        result = self.session.execute(delete(Post).where(Post.id == post_id))
        return bool(result.rowcount)
