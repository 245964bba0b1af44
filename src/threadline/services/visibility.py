"""Per-viewer field visibility applied at the serialization boundary."""
from __future__ import annotations

from dataclasses import replace

from threadline.records import PostRecord, UserRecord

HIDDEN_EMAIL = ""


def redact_user(user: UserRecord, viewer_id: int | None) -> UserRecord:
    """Return `user` with the email blanked unless the viewer owns the account."""
    if viewer_id is not None and viewer_id == user.id:
        return user
    return replace(user, email=HIDDEN_EMAIL)


def redact(post: PostRecord, viewer_id: int | None) -> PostRecord:
    """Return `post` with its embedded creator redacted for `viewer_id`.

    Any vote status attached to the post is kept only for a signed-in
    viewer, since it is by construction the viewer's own vote.
    """
    vote_status = post.vote_status if viewer_id is not None else None
    return replace(post, creator=redact_user(post.creator, viewer_id), vote_status=vote_status)
