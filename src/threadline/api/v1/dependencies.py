"""Shared API dependencies for sessions and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from threadline.core.errors import (
    AuthError,
    NotFoundError,
    PermissionDeniedError,
    ThreadlineError,
    ValidationError,
)
from threadline.core.settings import settings
from threadline.db.session import get_db
from threadline.schemas.common import FieldErrorOut
from threadline.services.email import EmailSender, get_email_sender
from threadline.services.session_store import (
    KeyValueStore,
    PasswordResetTokens,
    SessionService,
    get_kv_store,
)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
KeyValueStoreDep = Annotated[KeyValueStore, Depends(get_kv_store)]
EmailSenderDep = Annotated[EmailSender, Depends(get_email_sender)]


def get_session_service(store: KeyValueStoreDep) -> SessionService:
    """Return the session service bound to the shared store."""
    return SessionService(store)


def get_reset_tokens(store: KeyValueStoreDep) -> PasswordResetTokens:
    """Return the password reset token service bound to the shared store."""
    return PasswordResetTokens(store)


SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]
ResetTokensDep = Annotated[PasswordResetTokens, Depends(get_reset_tokens)]


def get_session_id(request: Request) -> str | None:
    """Return the session id carried by the request cookie, if any."""
    return request.cookies.get(settings.session_cookie_name)


def get_viewer_id(request: Request, sessions: SessionServiceDep) -> int | None:
    """Return the signed-in user's id, or None for anonymous requests."""
    return sessions.resolve(get_session_id(request))


def get_current_user_id(viewer_id: Annotated[int | None, Depends(get_viewer_id)]) -> int:
    """Return the signed-in user's id.

    Raises:
        HTTPException: 401 if the request has no valid session.
    """
    if viewer_id is None:
        raise to_http_error(AuthError())
    return viewer_id


ViewerIdDep = Annotated[int | None, Depends(get_viewer_id)]
CurrentUserIdDep = Annotated[int, Depends(get_current_user_id)]


def start_session(response: Response, sessions: SessionService, user_id: int) -> None:
    """Create a server-side session and hand its id to the client as a cookie."""
    session_id = sessions.create(user_id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def to_http_error(exc: ThreadlineError) -> HTTPException:
    """Translate a domain error into the matching HTTP error."""
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": [e.model_dump() for e in FieldErrorOut.from_errors(exc.errors)]},
        )
    if isinstance(exc, AuthError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
