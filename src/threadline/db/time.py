# src/threadline/db/time.py
"""Time utilities for database models and cursors."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time truncated to whole milliseconds.

    Creation timestamps double as pagination cursors, which travel as
    integer milliseconds.
    """
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def to_epoch_ms(value: datetime) -> int:
    """Return milliseconds since the epoch; naive values are read as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: int) -> datetime:
    """Return a timezone-aware UTC datetime for an epoch-milliseconds value."""
    seconds, millis = divmod(value, 1000)
    return datetime.fromtimestamp(seconds, UTC).replace(microsecond=millis * 1000)
