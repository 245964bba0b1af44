"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import Field

from .common import RequestModel


class VoteCreate(RequestModel):
    """Schema for casting a vote."""

    post_id: int
    value: Literal[-1, 1] = Field(..., description="1 for upvote, -1 for downvote")
