# src/threadline/api/v1/endpoints/auth.py
"""Registration, login, logout and password reset endpoints.

Account mutations answer with `{"user": ...}` or `{"errors": [...]}`; a
field-level problem is never an HTTP error.
"""

from __future__ import annotations

import logging

import redis
from fastapi import APIRouter, Request, Response

from threadline.core.errors import ValidationError
from threadline.core.settings import settings
from threadline.records import UserRecord
from threadline.repositories.user_repo import UserRepository
from threadline.schemas.common import FieldErrorOut
from threadline.schemas.user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    UserOut,
    UserResponse,
)
from threadline.services import user_service

from ..dependencies import (
    EmailSenderDep,
    ResetTokensDep,
    SessionDep,
    SessionServiceDep,
    ViewerIdDep,
    get_session_id,
    start_session,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _user_response(user: UserRecord) -> UserResponse:
    # The caller is the account owner here, so the email stays visible.
    return UserResponse(user=UserOut.model_validate(user))


def _error_response(exc: ValidationError) -> UserResponse:
    return UserResponse(errors=FieldErrorOut.from_errors(exc.errors))


@router.post("/register", response_model=UserResponse, response_model_exclude_none=True)
async def register(
    payload: RegisterRequest,
    response: Response,
    db: SessionDep,
    sessions: SessionServiceDep,
) -> UserResponse:
    """Create an account and sign it in."""
    try:
        user = user_service.register_user(
            db,
            username=payload.username,
            email=payload.email,
            password=payload.password,
        )
    except ValidationError as exc:
        return _error_response(exc)

    start_session(response, sessions, user.id)
    return _user_response(user)


@router.post("/login", response_model=UserResponse, response_model_exclude_none=True)
async def login(
    payload: LoginRequest,
    response: Response,
    db: SessionDep,
    sessions: SessionServiceDep,
) -> UserResponse:
    """Sign in with a username or email and a password."""
    try:
        user = user_service.authenticate(
            db,
            username_or_email=payload.username_or_email,
            password=payload.password,
        )
    except ValidationError as exc:
        return _error_response(exc)

    start_session(response, sessions, user.id)
    return _user_response(user)


@router.post("/logout")
async def logout(request: Request, response: Response, sessions: SessionServiceDep) -> bool:
    """End the current session and clear its cookie."""
    try:
        sessions.destroy(get_session_id(request))
    except redis.RedisError as exc:
        logger.warning("Failed to destroy session: %s", exc)
        return False
    response.delete_cookie(settings.session_cookie_name)
    return True


@router.get("/me", response_model=UserOut | None)
async def me(db: SessionDep, viewer_id: ViewerIdDep) -> UserOut | None:
    """Return the signed-in account, or null."""
    if viewer_id is None:
        return None
    user = UserRepository(db).get(viewer_id)
    return UserOut.model_validate(user) if user is not None else None


@router.post("/forgot-password")
async def forgot_password(
    payload: ForgotPasswordRequest,
    db: SessionDep,
    tokens: ResetTokensDep,
    mailer: EmailSenderDep,
) -> bool:
    """Email a password reset link; false if no account uses the address."""
    return user_service.request_password_reset(
        db,
        email=payload.email,
        tokens=tokens,
        mailer=mailer,
    )


@router.post("/change-password", response_model=UserResponse, response_model_exclude_none=True)
async def change_password(
    payload: ChangePasswordRequest,
    response: Response,
    db: SessionDep,
    sessions: SessionServiceDep,
    tokens: ResetTokensDep,
) -> UserResponse:
    """Set a new password from a reset token and sign the account in."""
    try:
        user = user_service.change_password(
            db,
            token=payload.token,
            new_password=payload.new_password,
            tokens=tokens,
        )
    except ValidationError as exc:
        return _error_response(exc)

    start_session(response, sessions, user.id)
    return _user_response(user)
