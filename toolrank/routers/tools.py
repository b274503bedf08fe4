"""Tool listing router: batch vote state and the monthly ranking."""

from typing import Annotated

from fastapi import APIRouter, Query

from toolrank.dependencies import ClockDep, CurrentUserOptional, UpvoteServiceDep
from toolrank.schemas.tools import (
    RankedTool,
    RankingResponse,
    ToolVoteStateListResponse,
    ToolVoteStateResponse,
)
from toolrank.utils.time_windows import month_start

router = APIRouter(prefix="/tools", tags=["Tools"])

MAX_TOOLS_PER_PAGE = 200


@router.get("/votes", response_model=ToolVoteStateListResponse)
async def get_vote_states(
    current_user: CurrentUserOptional,
    service: UpvoteServiceDep,
    clock: ClockDep,
    tool_ids: Annotated[list[str], Query(min_length=1, max_length=MAX_TOOLS_PER_PAGE)],
) -> ToolVoteStateListResponse:
    """Upvote counts, and the caller's vote/favorite flags, for a page of tools."""
    user_id = current_user.user_id if current_user else None
    states = await service.listing_state(user_id, tool_ids, clock())

    return ToolVoteStateListResponse(
        tools=[
            ToolVoteStateResponse(
                tool_id=s.tool_id,
                upvote_count=s.upvote_count,
                user_upvoted=s.user_upvoted,
                favorited=s.favorited,
            )
            for s in states
        ]
    )


@router.get("/ranking", response_model=RankingResponse)
async def get_ranking(
    service: UpvoteServiceDep,
    clock: ClockDep,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> RankingResponse:
    """This month's most-upvoted tools. Tools without upvotes are not listed."""
    now = clock()
    ranked = await service.ranking(now, limit=limit, offset=offset)

    return RankingResponse(
        month=month_start(now).isoformat(),
        tools=[
            RankedTool(rank=offset + i + 1, tool_id=tool_id, upvote_count=count)
            for i, (tool_id, count) in enumerate(ranked)
        ],
        limit=limit,
        offset=offset,
    )
