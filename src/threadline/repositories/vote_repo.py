"""Data access for vote rows and the score they maintain."""
from __future__ import annotations

from sqlalchemy import func, insert, select, update
from sqlalchemy.orm import Session

from threadline.models import Post, Vote

__all__ = ["VoteRepository"]


class VoteRepository:
    """SQL implementation of the vote ledger's storage operations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def lock_post(self, post_id: int) -> bool:
        """Lock the post row for the rest of the transaction.

        Returns False if the post does not exist. Dialects without row
        locks (SQLite) ignore FOR UPDATE and serialise writers instead.
        """
        found = self.session.execute(
            select(Post.id).where(Post.id == post_id).with_for_update()
        ).scalar_one_or_none()
        return found is not None

    def get_vote(self, user_id: int, post_id: int) -> int | None:
        return self.session.execute(
            select(Vote.value).where(Vote.user_id == user_id, Vote.post_id == post_id)
        ).scalar_one_or_none()

    def insert_vote(self, user_id: int, post_id: int, value: int) -> None:
        self.session.execute(insert(Vote).values(user_id=user_id, post_id=post_id, value=value))

    def update_vote(self, user_id: int, post_id: int, value: int) -> None:
        self.session.execute(
            update(Vote)
            .where(Vote.user_id == user_id, Vote.post_id == post_id)
            .values(value=value)
        )

    def adjust_score(self, post_id: int, delta: int) -> None:
        """Add `delta` to the post score in the database, not in Python."""
        self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(score=Post.score + delta)
            .execution_options(synchronize_session=False)
        )

    def score(self, post_id: int) -> int | None:
        return self.session.execute(
            select(Post.score).where(Post.id == post_id)
        ).scalar_one_or_none()

    def vote_total(self, post_id: int) -> int:
        """Return the sum of vote values recorded for a post."""
        return int(
            self.session.execute(
                select(func.coalesce(func.sum(Vote.value), 0)).where(Vote.post_id == post_id)
            ).scalar_one()
        )
