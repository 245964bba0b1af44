# src/threadline/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Threadline API."""

from fastapi import APIRouter, status

from threadline.core.errors import ThreadlineError
from threadline.schemas.vote import VoteCreate
from threadline.services.vote_ledger import cast_vote as ledger_cast_vote

from ..dependencies import CurrentUserIdDep, SessionDep, to_http_error

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", status_code=status.HTTP_200_OK)
async def cast_vote(vote_data: VoteCreate, user_id: CurrentUserIdDep, db: SessionDep) -> bool:
    """Cast, change or repeat a vote on a post.

    Repeating the current vote is a successful no-op; there is no unvote.

    Raises:
        HTTPException: 401 without a session, 404 if the post does not exist
    """
    try:
        return ledger_cast_vote(
            db,
            post_id=vote_data.post_id,
            user_id=user_id,
            value=vote_data.value,
        )
    except ThreadlineError as exc:
        raise to_http_error(exc) from exc
