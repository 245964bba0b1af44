"""Domain errors raised by services and translated at the API boundary."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A user-correctable failure tagged with the offending field."""

    field: str
    message: str


class ThreadlineError(Exception):
    """Base class for all domain errors."""


class ValidationError(ThreadlineError):
    """One or more field-level validation failures."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    @classmethod
    def single(cls, field: str, message: str) -> ValidationError:
        return cls([FieldError(field=field, message=message)])


class ConflictError(ValidationError):
    """A unique constraint was violated (username or email taken)."""


class AuthError(ThreadlineError):
    """The request carries no valid session."""

    def __init__(self, message: str = "not authenticated") -> None:
        super().__init__(message)


class PermissionDeniedError(ThreadlineError):
    """The caller is authenticated but does not own the resource."""


class NotFoundError(ThreadlineError):
    """A referenced post or user does not exist."""
