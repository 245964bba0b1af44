"""Service-level helpers for creating, editing and deleting posts."""
from __future__ import annotations

from sqlalchemy.orm import Session

from threadline.core.errors import NotFoundError, PermissionDeniedError
from threadline.records import PostRecord
from threadline.repositories.post_repo import PostRepository
from threadline.services.visibility import redact


def get_post(db: Session, *, post_id: int, viewer_id: int | None = None) -> PostRecord | None:
    """Return a post redacted for the viewer, or None if absent."""
    post = PostRepository(db).get(post_id, viewer_id=viewer_id)
    return redact(post, viewer_id) if post is not None else None


def create_post(db: Session, *, creator_id: int, title: str, text: str) -> PostRecord:
    """Persist a new post for `creator_id`; its score starts at zero."""
    post = PostRepository(db).create(title=title, text=text, creator_id=creator_id)
    db.commit()
    return redact(post, creator_id)


def _ensure_owner(repo: PostRepository, post_id: int, actor_id: int) -> bool:
    """Return False if the post is absent; raise if `actor_id` does not own it."""
    creator_id = repo.get_creator_id(post_id)
    if creator_id is None:
        return False
    if creator_id != actor_id:
        raise PermissionDeniedError("you can only change your own posts")
    return True


def update_post(
    db: Session,
    *,
    actor_id: int,
    post_id: int,
    title: str | None = None,
    text: str | None = None,
) -> PostRecord | None:
    """Edit a post's title and/or text.

    Returns:
        The updated post, or None if it does not exist.

    Raises:
        PermissionDeniedError: If the caller did not create the post.
    """
    repo = PostRepository(db)
    if not _ensure_owner(repo, post_id, actor_id):
        return None
    repo.update(post_id, title=title, text=text)
    db.commit()
    return get_post(db, post_id=post_id, viewer_id=actor_id)


def delete_post(db: Session, *, actor_id: int, post_id: int) -> bool:
    """Hard-delete a post and its votes.

    Raises:
        NotFoundError: If the post does not exist.
        PermissionDeniedError: If the caller did not create the post.
    """
    repo = PostRepository(db)
    if not _ensure_owner(repo, post_id, actor_id):
        raise NotFoundError(f"post {post_id} not found")
    repo.delete(post_id)
    db.commit()
    return True
