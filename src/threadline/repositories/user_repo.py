"""Data access helpers for user accounts."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from threadline.models import User
from threadline.records import UserRecord

from ._convert import user_to_record

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user accounts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> UserRecord | None:
        user = self.session.get(User, user_id)
        return user_to_record(user) if user is not None else None

    def list_all(self) -> list[UserRecord]:
        users = self.session.execute(select(User).order_by(User.id)).scalars()
        return [user_to_record(user) for user in users]

    def find_credentials(self, username_or_email: str) -> tuple[UserRecord, str] | None:
        """Look up an account by email when the identifier has an '@', else by username.

        Returns:
            The user record and its stored password hash, or None.
        """
        if "@" in username_or_email:
            clause = User.email == username_or_email
        else:
            clause = User.username == username_or_email
        user = self.session.execute(select(User).where(clause)).scalar_one_or_none()
        if user is None:
            return None
        return user_to_record(user), user.password

    def get_by_email(self, email: str) -> UserRecord | None:
        user = self.session.execute(select(User).where(User.email == email)).scalar_one_or_none()
        return user_to_record(user) if user is not None else None

    def create(self, *, username: str, email: str, password_hash: str) -> UserRecord:
        """Insert a new account; raises IntegrityError on duplicate username/email."""
        user = User(username=username, email=email, password=password_hash)
        self.session.add(user)
        self.session.flush()
        self.session.refresh(user)
        return user_to_record(user)

    def set_password(self, user_id: int, password_hash: str) -> bool:
        user = self.session.get(User, user_id)
        if user is None:
            return False
        user.password = password_hash
        self.session.flush()
        return True

    def delete(self, user_id: int) -> bool:
        result = self.session.execute(delete(User).where(User.id == user_id))
        return bool(result.rowcount)
