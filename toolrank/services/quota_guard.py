"""Daily upvote quota checks."""

from dataclasses import dataclass
from datetime import datetime

from toolrank.exceptions import AlreadyVotedTodayError, DailyLimitReachedError
from toolrank.limits import DEFAULT_UPVOTE_POLICY, UpvotePolicy
from toolrank.repositories.upvote_repository import UpvoteRepository
from toolrank.utils.logger import get_logger
from toolrank.utils.time_windows import day_end, next_month_start

log = get_logger(__name__)


@dataclass
class QuotaStatus:
    """A user's upvote allowance for the current UTC day."""

    limit: int
    used: int
    daily_reset_at: datetime
    monthly_reset_at: datetime

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)


class DailyQuotaGuard:
    """Pre-insert checks for the per-tool daily uniqueness and the daily cap.

    These checks give precise errors for the common case. They are not what
    keeps the invariants under concurrency: ``UpvoteRepository.cast_upvote``
    re-validates both inside its insert.
    """

    def __init__(self, upvote_repo: UpvoteRepository, policy: UpvotePolicy = DEFAULT_UPVOTE_POLICY):
        self.upvote_repo = upvote_repo
        self.policy = policy

    async def authorize(self, user_id: str, tool_id: str, now: datetime) -> None:
        """
        Check that the user may upvote the tool now.

        Raises:
            AlreadyVotedTodayError: The user already upvoted this tool today
            DailyLimitReachedError: The user has no upvotes left today
        """
        if await self.upvote_repo.has_voted_today(user_id, tool_id, now):
            log.debug("upvote denied", reason="already_voted", user_id=user_id, tool_id=tool_id)
            raise AlreadyVotedTodayError(tool_id)

        used = await self.upvote_repo.todays_vote_count(user_id, now)
        if used >= self.policy.daily_limit:
            log.debug("upvote denied", reason="daily_limit", user_id=user_id, used=used)
            raise DailyLimitReachedError(limit=self.policy.daily_limit, used=used)

    async def quota_status(self, user_id: str, now: datetime) -> QuotaStatus:
        used = await self.upvote_repo.todays_vote_count(user_id, now)
        return QuotaStatus(
            limit=self.policy.daily_limit,
            used=used,
            daily_reset_at=day_end(now),
            monthly_reset_at=next_month_start(now),
        )
