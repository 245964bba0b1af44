"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import RequestModel, ResponseModel
from .user import UserOut


class PostCreate(RequestModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=300)
    text: str = Field(..., min_length=1, max_length=10000)


class PostUpdate(RequestModel):
    """Partial edit; omitted fields stay as they are."""

    title: str | None = Field(None, min_length=1, max_length=300)
    text: str | None = Field(None, min_length=1, max_length=10000)


class PostOut(ResponseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    text: str
    text_snippet: str
    score: int
    creator_id: int
    created_at: datetime
    updated_at: datetime
    creator: UserOut
    vote_status: int | None = Field(None, description="The viewer's own vote: 1, -1 or null")


class PaginatedPosts(ResponseModel):
    """One feed page; pass `next_cursor` back to fetch the following page."""

    posts: list[PostOut]
    has_more: bool
    next_cursor: str | None = None
