"""Server-side sessions and password reset tokens kept in Redis.

A `KeyValueStore` built without a Redis client keeps keys in a
process-local map with expiry, which is what the test suite uses.
"""

from __future__ import annotations

import time
from threading import Lock
from typing import Final

import redis

from threadline.core.security import new_token
from threadline.core.settings import settings

SESSION_PREFIX: Final[str] = "sess:"
FORGET_PASSWORD_PREFIX: Final[str] = "forget-password:"


class KeyValueStore:
    """String key-value store with per-key expiry."""

    def __init__(self, client: redis.Redis | None = None) -> None:
        self._redis = client
        self._local: dict[str, tuple[str, float]] = {}
        self._lock = Lock()

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if self._redis is not None:
            self._redis.set(key, value, ex=int(ttl_seconds))
            return
        with self._lock:
            self._local[key] = (value, time.monotonic() + ttl_seconds)

    def get(self, key: str) -> str | None:
        if self._redis is not None:
            raw = self._redis.get(key)
            if raw is None:
                return None
            return raw.decode() if isinstance(raw, bytes) else str(raw)
        with self._lock:
            entry = self._local.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if expiry <= time.monotonic():
                self._local.pop(key, None)
                return None
            return value

    def pop(self, key: str) -> str | None:
        """Remove `key` and return its live value in one step."""
        if self._redis is not None:
            raw = self._redis.getdel(key)
            if raw is None:
                return None
            return raw.decode() if isinstance(raw, bytes) else str(raw)
        with self._lock:
            entry = self._local.pop(key, None)
        if entry is None:
            return None
        value, expiry = entry
        return value if expiry > time.monotonic() else None

    def delete(self, key: str) -> None:
        if self._redis is not None:
            self._redis.delete(key)
            return
        with self._lock:
            self._local.pop(key, None)


class SessionService:
    """Maps opaque session ids (the cookie value) to user ids."""

    def __init__(self, store: KeyValueStore, ttl_seconds: int | None = None) -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds or settings.session_max_age_seconds

    def create(self, user_id: int) -> str:
        """Start a session for `user_id` and return its id."""
        session_id = new_token()
        self.store.set(SESSION_PREFIX + session_id, str(user_id), self.ttl_seconds)
        return session_id

    def resolve(self, session_id: str | None) -> int | None:
        """Return the user id bound to `session_id`, or None."""
        if not session_id:
            return None
        raw = self.store.get(SESSION_PREFIX + session_id)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def destroy(self, session_id: str | None) -> None:
        if session_id:
            self.store.delete(SESSION_PREFIX + session_id)


class PasswordResetTokens:
    """Single-use password reset tokens with an expiry."""

    def __init__(self, store: KeyValueStore, ttl_seconds: int | None = None) -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds or settings.password_reset_ttl_seconds

    def issue(self, user_id: int) -> str:
        token = new_token()
        self.store.set(FORGET_PASSWORD_PREFIX + token, str(user_id), self.ttl_seconds)
        return token

    def peek(self, token: str) -> int | None:
        """Return the user id a live token was issued for, or None."""
        raw = self.store.get(FORGET_PASSWORD_PREFIX + token)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def take(self, token: str) -> int | None:
        """Consume a token, returning its user id; only one caller ever gets it."""
        raw = self.store.pop(FORGET_PASSWORD_PREFIX + token)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def revoke(self, token: str) -> None:
        self.store.delete(FORGET_PASSWORD_PREFIX + token)


_STORE: KeyValueStore | None = None


def get_kv_store() -> KeyValueStore:
    """Return the process-wide store backed by `settings.redis_url`."""
    global _STORE
    if _STORE is None:
        _STORE = KeyValueStore(redis.from_url(settings.redis_url))
    return _STORE
