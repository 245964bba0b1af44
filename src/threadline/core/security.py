"""Password hashing built on bcrypt."""
from __future__ import annotations

import secrets

import bcrypt

# bcrypt only looks at this many bytes and rejects longer input.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of `password`."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(hashed: str, password: str) -> bool:
    """Check `password` against a stored bcrypt hash.

    Args:
        hashed: Hash produced by `hash_password`.
        password: Plain-text candidate submitted by the client.

    Returns:
        True if the password matches; False otherwise, including when the
        stored value is not a valid bcrypt hash.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def new_token() -> str:
    """Return a random URL-safe token for sessions and reset links."""
    return secrets.token_urlsafe(32)
