"""Transaction scoping with bounded retry on serialization failures."""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def is_serialization_failure(exc: DBAPIError) -> bool:
    """Return True if the driver reports a serialization failure or deadlock."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code in RETRYABLE_SQLSTATES


def run_in_transaction(
    db: Session,
    work: Callable[[Session], T],
    *,
    attempts: int = 3,
    retry_on: tuple[type[DBAPIError], ...] = (),
) -> T:
    """Run `work` and commit it as one unit, retrying transient failures.

    Args:
        db: Session the work runs on. It is rolled back after any failure.
        work: Callable performing reads and writes; it must be safe to run
            again from scratch, so it re-reads whatever state it decides on.
        attempts: Total number of tries, at least one.
        retry_on: Extra database error types treated as transient, such as
            an `IntegrityError` from two racing inserts of the same key.

    Returns:
        Whatever `work` returned on the attempt that committed.

    Raises:
        DBAPIError: The last database error once attempts are exhausted, or
            immediately for non-transient errors.
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except DBAPIError as exc:
            db.rollback()
            transient = is_serialization_failure(exc) or isinstance(exc, retry_on)
            if not transient or attempt == attempts:
                raise
            logger.warning(
                "Transaction attempt %d/%d failed transiently: %s",
                attempt,
                attempts,
                exc.orig,
            )
        except BaseException:
            db.rollback()
            raise
    raise AssertionError("unreachable")  # pragma: no cover
