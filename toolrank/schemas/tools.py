"""Tool listing and ranking schemas."""

from pydantic import BaseModel, Field


class ToolVoteStateResponse(BaseModel):
    """Vote state of one tool as shown on listing pages."""

    tool_id: str
    upvote_count: int
    user_upvoted: bool = False
    favorited: bool = False


class ToolVoteStateListResponse(BaseModel):
    tools: list[ToolVoteStateResponse]


class RankedTool(BaseModel):
    """A tool's position on this month's leaderboard."""

    rank: int = Field(..., ge=1)
    tool_id: str
    upvote_count: int


class RankingResponse(BaseModel):
    """This month's tools ordered by visible upvote count."""

    month: str = Field(..., description="First day of the ranked month (YYYY-MM-DD)")
    tools: list[RankedTool]
    limit: int
    offset: int
