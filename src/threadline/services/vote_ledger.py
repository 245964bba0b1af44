"""Vote ledger: one signed vote per (user, post) and the running post score.

The ledger is the only writer of both `vote` rows and `post.score`, which
keeps `score == sum(vote.value)` for every post. The decision logic works
against the small `VoteStore` protocol; `cast_vote` binds it to the SQL
repository inside a retried transaction.
"""
from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from threadline.core.errors import AuthError, NotFoundError, ValidationError
from threadline.core.settings import settings
from threadline.db.transaction import run_in_transaction
from threadline.repositories.vote_repo import VoteRepository

logger = logging.getLogger(__name__)

UPVOTE = 1
DOWNVOTE = -1
VALID_VOTE_VALUES = frozenset({UPVOTE, DOWNVOTE})


class VoteStore(Protocol):
    """Storage operations the ledger needs, all within one transaction."""

    def lock_post(self, post_id: int) -> bool: ...

    def get_vote(self, user_id: int, post_id: int) -> int | None: ...

    def insert_vote(self, user_id: int, post_id: int, value: int) -> None: ...

    def update_vote(self, user_id: int, post_id: int, value: int) -> None: ...

    def adjust_score(self, post_id: int, delta: int) -> None: ...


def score_delta(previous: int | None, value: int) -> int:
    """Return how much the post score moves when `value` replaces `previous`.

    A first vote adds its value, a flip adds twice the new value (dropping
    the old contribution and adding the new one), a repeat adds nothing.
    """
    if previous is None:
        return value
    if previous == value:
        return 0
    return 2 * value


def apply_vote(store: VoteStore, *, post_id: int, user_id: int, value: int) -> int:
    """Record `value` for the user on the post and adjust the score.

    Must run inside a transaction; the prior vote is read after the post
    row is locked so concurrent votes on the same post serialise.

    Returns:
        The score delta applied (0 for an idempotent repeat).

    Raises:
        NotFoundError: If the post does not exist.
    """
    if not store.lock_post(post_id):
        raise NotFoundError(f"post {post_id} not found")

    previous = store.get_vote(user_id, post_id)
    delta = score_delta(previous, value)
    if delta == 0:
        return 0

    if previous is None:
        store.insert_vote(user_id, post_id, value)
    else:
        store.update_vote(user_id, post_id, value)
    store.adjust_score(post_id, delta)

    logger.debug(
        "Vote by user %s on post %s: %s -> %s (score %+d)",
        user_id,
        post_id,
        previous,
        value,
        delta,
    )
    return delta


def cast_vote(
    db: Session,
    *,
    post_id: int,
    user_id: int | None,
    value: int,
    attempts: int | None = None,
) -> bool:
    """Cast or change a vote atomically.

    Args:
        db: Request-scoped database session.
        post_id: Post being voted on.
        user_id: Authenticated voter; None is rejected.
        value: +1 or -1.
        attempts: Transaction tries before giving up; defaults to
            `settings.vote_max_attempts`.

    Returns:
        True once the vote is recorded (or was already recorded).

    Raises:
        AuthError: If there is no authenticated user.
        ValidationError: If `value` is not +1 or -1.
        NotFoundError: If the post does not exist.
    """
    if user_id is None:
        raise AuthError()
    if value not in VALID_VOTE_VALUES:
        raise ValidationError.single("value", "vote value must be 1 or -1")

    run_in_transaction(
        db,
        lambda session: apply_vote(
            VoteRepository(session),
            post_id=post_id,
            user_id=user_id,
            value=value,
        ),
        attempts=attempts if attempts is not None else settings.vote_max_attempts,
        # Two first votes racing on a backend without row locks collide on
        # the (user_id, post_id) key; the retry sees the winner's row.
        retry_on=(IntegrityError,),
    )
    return True
