"""Upvote schemas."""

from pydantic import BaseModel, Field


class UpvoteResponse(BaseModel):
    """Tool's visible count and the caller's vote state after an upvote action."""

    upvote_count: int = Field(..., ge=0, description="Upvotes in the current monthly bucket")
    user_upvoted: bool = Field(..., description="Whether the caller holds a vote for today")
