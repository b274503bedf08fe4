"""Upvote router."""

from typing import Annotated

from fastapi import APIRouter, Path

from toolrank.dependencies import ClockDep, CurrentUserRequired, UpvoteServiceDep
from toolrank.schemas.upvotes import UpvoteResponse

router = APIRouter(prefix="/tools", tags=["Upvotes"])

ToolId = Annotated[str, Path(min_length=1, max_length=255)]


@router.post("/{tool_id}/upvote", response_model=UpvoteResponse)
async def upvote_tool(
    tool_id: ToolId,
    current_user: CurrentUserRequired,
    service: UpvoteServiceDep,
    clock: ClockDep,
) -> UpvoteResponse:
    """
    Upvote a tool for today.

    Each user may upvote a given tool once per UTC day and at most three
    distinct tools per day.

    Returns:
        UpvoteResponse with the tool's count for the current month
    """
    result = await service.upvote(current_user.user_id, tool_id, clock())
    return UpvoteResponse(upvote_count=result.upvote_count, user_upvoted=result.user_upvoted)


@router.delete("/{tool_id}/upvote", response_model=UpvoteResponse)
async def retract_upvote(
    tool_id: ToolId,
    current_user: CurrentUserRequired,
    service: UpvoteServiceDep,
    clock: ClockDep,
) -> UpvoteResponse:
    """Remove today's upvote for a tool. Succeeds even if there is none."""
    result = await service.retract(current_user.user_id, tool_id, clock())
    return UpvoteResponse(upvote_count=result.upvote_count, user_upvoted=result.user_upvoted)
