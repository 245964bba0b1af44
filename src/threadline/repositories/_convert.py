"""ORM-to-record conversion shared by the repositories."""
from __future__ import annotations

from threadline.models import Post, User
from threadline.records import PostRecord, UserRecord


def user_to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def post_to_record(post: Post, vote_status: int | None = None) -> PostRecord:
    return PostRecord(
        id=post.id,
        title=post.title,
        text=post.text,
        score=post.score,
        creator_id=post.creator_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
        creator=user_to_record(post.creator),
        vote_status=vote_status,
    )
