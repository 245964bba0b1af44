"""Account registration, login and password reset."""
from __future__ import annotations

import logging
import smtplib
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from threadline.core import security
from threadline.core.errors import (
    ConflictError,
    FieldError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from threadline.core.settings import settings
from threadline.records import UserRecord
from threadline.repositories.user_repo import UserRepository
from threadline.services.session_store import PasswordResetTokens

logger = logging.getLogger(__name__)

__all__ = [
    "validate_register",
    "register_user",
    "authenticate",
    "request_password_reset",
    "change_password",
    "delete_user",
]

MIN_USERNAME_LENGTH = 5
MIN_PASSWORD_LENGTH = 5
UNIQUE_VIOLATION = "23505"


class Mailer(Protocol):
    def send(self, to: str, html: str, subject: str) -> None: ...


def _password_problem(password: str) -> str | None:
    if len(password.strip()) < MIN_PASSWORD_LENGTH:
        return f"password must be at least {MIN_PASSWORD_LENGTH} characters"
    if len(password.encode("utf-8")) > security.MAX_PASSWORD_BYTES:
        return f"password must be at most {security.MAX_PASSWORD_BYTES} bytes"
    return None


def validate_register(username: str, email: str, password: str) -> list[FieldError]:
    """Return every problem with a registration form; empty means valid."""
    errors: list[FieldError] = []
    if len(username.strip()) < MIN_USERNAME_LENGTH:
        errors.append(
            FieldError("username", f"username must be at least {MIN_USERNAME_LENGTH} characters")
        )
    if "@" in username:
        errors.append(FieldError("username", "username cannot contain '@'"))
    password_problem = _password_problem(password)
    if password_problem is not None:
        errors.append(FieldError("password", password_problem))
    if "@" not in email:
        errors.append(FieldError("email", "invalid email address"))
    return errors


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


def register_user(db: Session, *, username: str, email: str, password: str) -> UserRecord:
    """Create an account and commit it.

    Raises:
        ValidationError: If the form fails validation.
        ConflictError: If the username or email is already taken.
        IntegrityError: For any other constraint failure.
    """
    errors = validate_register(username, email, password)
    if errors:
        raise ValidationError(errors)

    repo = UserRepository(db)
    try:
        user = repo.create(
            username=username,
            email=email,
            password_hash=security.hash_password(password),
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_unique_violation(exc):
            raise ConflictError.single("username", "username or email already exists") from exc
        logger.error("Unexpected integrity error registering %r: %s", username, exc.orig)
        raise
    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


def authenticate(db: Session, *, username_or_email: str, password: str) -> UserRecord:
    """Return the account matching the credentials.

    Raises:
        ValidationError: Tagged `usernameOrEmail` for an unknown account or
            `password` for a wrong password.
    """
    found = UserRepository(db).find_credentials(username_or_email)
    if found is None:
        raise ValidationError.single("usernameOrEmail", "that username does not exist")
    user, password_hash = found
    if not security.verify_password(password_hash, password):
        raise ValidationError.single("password", "incorrect password")
    return user


def request_password_reset(
    db: Session,
    *,
    email: str,
    tokens: PasswordResetTokens,
    mailer: Mailer,
    frontend_origin: str | None = None,
) -> bool:
    """Email a single-use reset link to the account owning `email`.

    Returns:
        False if no account uses the address (nothing is sent), else True.
    """
    user = UserRepository(db).get_by_email(email)
    if user is None:
        return False

    token = tokens.issue(user.id)
    origin = (frontend_origin or settings.frontend_origin).rstrip("/")
    html = f'<a href="{origin}/change-password/{token}">reset password</a>'
    try:
        mailer.send(email, html, "Forgot Password")
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send password reset email to user %s", user.id)
        raise
    return True


def change_password(
    db: Session,
    *,
    token: str,
    new_password: str,
    tokens: PasswordResetTokens,
) -> UserRecord:
    """Set a new password using a reset token, consuming the token.

    Raises:
        ValidationError: Tagged `newPassword` if too short or too long, or
            `token` if the token is unknown/expired or its account is gone.
    """
    password_problem = _password_problem(new_password)
    if password_problem is not None:
        raise ValidationError.single("newPassword", password_problem)

    # Claiming the token removes it, so a concurrent request with the same
    # token finds nothing.
    user_id = tokens.take(token)
    if user_id is None:
        raise ValidationError.single("token", "token expired")

    repo = UserRepository(db)
    user = repo.get(user_id)
    if user is None:
        raise ValidationError.single("token", "user no longer exists")

    repo.set_password(user_id, security.hash_password(new_password))
    db.commit()
    logger.info("Password changed for user %s", user_id)
    return user


def delete_user(db: Session, *, actor_id: int, user_id: int) -> bool:
    """Delete an account; users may only delete themselves.

    Raises:
        PermissionDeniedError: If `actor_id` is not `user_id`.
        NotFoundError: If the account does not exist.
    """
    if actor_id != user_id:
        raise PermissionDeniedError("you can only delete your own account")
    if not UserRepository(db).delete(user_id):
        raise NotFoundError(f"user {user_id} not found")
    db.commit()
    return True
