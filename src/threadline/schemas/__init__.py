# src/threadline/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import FieldErrorOut
from .post import PaginatedPosts, PostCreate, PostOut, PostUpdate
from .user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    UserOut,
    UserResponse,
)
from .vote import VoteCreate

__all__ = [
    "FieldErrorOut",
    "PaginatedPosts", "PostCreate", "PostOut", "PostUpdate",
    "ChangePasswordRequest", "ForgotPasswordRequest", "LoginRequest",
    "RegisterRequest", "UserOut", "UserResponse",
    "VoteCreate",
]
