"""Users router -- upvote quota for the caller."""

from fastapi import APIRouter

from toolrank.dependencies import ClockDep, CurrentUserRequired, UpvoteServiceDep
from toolrank.schemas.users import UpvoteQuotaResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me/upvote-quota", response_model=UpvoteQuotaResponse)
async def get_upvote_quota(
    user: CurrentUserRequired,
    service: UpvoteServiceDep,
    clock: ClockDep,
) -> UpvoteQuotaResponse:
    """Get today's upvote usage and the next daily and monthly reset instants."""
    quota = await service.quota_status(user.user_id, clock())

    return UpvoteQuotaResponse(
        limit=quota.limit,
        used=quota.used,
        remaining=quota.remaining,
        daily_reset_at=quota.daily_reset_at,
        monthly_reset_at=quota.monthly_reset_at,
    )
