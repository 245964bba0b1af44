"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import FieldErrorOut, RequestModel, ResponseModel


class RegisterRequest(RequestModel):
    """Schema for account registration; rules are checked by the service."""

    username: str
    email: str
    password: str


class LoginRequest(RequestModel):
    """Schema for login submissions."""

    username_or_email: str = Field(..., description="Username, or email if it contains '@'")
    password: str


class ForgotPasswordRequest(RequestModel):
    email: str


class ChangePasswordRequest(RequestModel):
    token: str = Field(..., description="Token from the password reset email")
    new_password: str


class UserOut(ResponseModel):
    """Public account fields; `email` is blank unless the viewer owns the account."""

    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime


class UserResponse(ResponseModel):
    """Result of an account mutation: either `user` or `errors`, never both."""

    errors: list[FieldErrorOut] | None = None
    user: UserOut | None = None
