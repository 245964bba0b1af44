# src/threadline/api/v1/endpoints/users.py
"""User listing and account deletion endpoints."""

from fastapi import APIRouter

from threadline.core.errors import ThreadlineError
from threadline.repositories.user_repo import UserRepository
from threadline.schemas.user import UserOut
from threadline.services import user_service
from threadline.services.visibility import redact_user

from ..dependencies import CurrentUserIdDep, SessionDep, ViewerIdDep, to_http_error

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=list[UserOut])
async def list_users(db: SessionDep, viewer_id: ViewerIdDep) -> list[UserOut]:
    """Return every account; emails other than the viewer's are blank."""
    return [
        UserOut.model_validate(redact_user(user, viewer_id))
        for user in UserRepository(db).list_all()
    ]


@router.get("/{user_id}", response_model=UserOut | None)
async def get_user(user_id: int, db: SessionDep, viewer_id: ViewerIdDep) -> UserOut | None:
    """Return one account, or null if it does not exist."""
    user = UserRepository(db).get(user_id)
    return UserOut.model_validate(redact_user(user, viewer_id)) if user is not None else None


@router.delete("/{user_id}")
async def delete_user(user_id: int, actor_id: CurrentUserIdDep, db: SessionDep) -> bool:
    """Delete the caller's own account together with its posts and votes."""
    try:
        return user_service.delete_user(db, actor_id=actor_id, user_id=user_id)
    except ThreadlineError as exc:
        raise to_http_error(exc) from exc
