"""Service orchestrating upvote, favorite and listing operations for a request."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from toolrank.database import storage_errors
from toolrank.limits import DEFAULT_UPVOTE_POLICY, UpvotePolicy
from toolrank.repositories.favorite_repository import FavoriteRepository
from toolrank.repositories.upvote_repository import UpvoteRepository
from toolrank.services.quota_guard import DailyQuotaGuard, QuotaStatus
from toolrank.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class UpvoteResult:
    upvote_count: int
    user_upvoted: bool


@dataclass
class ToolVoteState:
    """Per-tool state rendered on listing pages."""

    tool_id: str
    upvote_count: int
    user_upvoted: bool
    favorited: bool


class UpvoteService:
    """Request-scoped facade over the upvote and favorite ledgers.

    Write operations commit their own transaction before returning, so the
    per-user advisory lock taken by a cast is released as soon as the row is
    durable.
    """

    def __init__(
        self,
        session: AsyncSession,
        upvote_repo: Optional[UpvoteRepository] = None,
        favorite_repo: Optional[FavoriteRepository] = None,
        policy: UpvotePolicy = DEFAULT_UPVOTE_POLICY,
    ):
        self.session = session
        self.upvote_repo = upvote_repo or UpvoteRepository(session)
        self.favorite_repo = favorite_repo or FavoriteRepository(session)
        self.policy = policy
        self.guard = DailyQuotaGuard(self.upvote_repo, policy)

    async def upvote(self, user_id: str, tool_id: str, now: datetime) -> UpvoteResult:
        """
        Cast today's upvote for a tool.

        Raises:
            AlreadyVotedTodayError: Already upvoted today (DuplicateVoteError if raced)
            DailyLimitReachedError: Daily cap exhausted
            StorageUnavailableError: Transient database failure
        """
        async with storage_errors():
            await self.guard.authorize(user_id, tool_id, now)
            count = await self.upvote_repo.cast_upvote(
                user_id, tool_id, now, self.policy.daily_limit
            )
            await self.session.commit()

        log.info("upvote cast", user_id=user_id, tool_id=tool_id, upvote_count=count)
        return UpvoteResult(upvote_count=count, user_upvoted=True)

    async def retract(self, user_id: str, tool_id: str, now: datetime) -> UpvoteResult:
        """Remove today's upvote for a tool. Idempotent."""
        async with storage_errors():
            count, still_voted = await self.upvote_repo.retract_upvote(user_id, tool_id, now)
            await self.session.commit()

        if still_voted:
            log.warning("upvote still present after retract", user_id=user_id, tool_id=tool_id)
        log.info("upvote retracted", user_id=user_id, tool_id=tool_id, upvote_count=count)
        return UpvoteResult(upvote_count=count, user_upvoted=still_voted)

    async def set_favorite(self, user_id: str, tool_id: str, desired: bool) -> bool:
        async with storage_errors():
            favorited = await self.favorite_repo.set_favorite(user_id, tool_id, desired)
            await self.session.commit()

        log.info("favorite updated", user_id=user_id, tool_id=tool_id, favorited=favorited)
        return favorited

    async def is_favorited(self, user_id: str, tool_id: str) -> bool:
        async with storage_errors():
            return await self.favorite_repo.is_favorited(user_id, tool_id)

    async def listing_state(
        self,
        user_id: Optional[str],
        tool_ids: Sequence[str],
        now: datetime,
    ) -> list[ToolVoteState]:
        """
        Vote and favorite state for a page of tools.

        Uses one grouped query per concern regardless of page size. Anonymous
        callers get counts only.
        """
        ids = list(dict.fromkeys(tool_ids))
        async with storage_errors():
            counts = await self.upvote_repo.visible_counts(ids, now)
            if user_id is not None:
                voted = await self.upvote_repo.has_voted_today_batch(user_id, ids, now)
                favorited = await self.favorite_repo.favorited_batch(user_id, ids)
            else:
                voted, favorited = set(), set()

        return [
            ToolVoteState(
                tool_id=tool_id,
                upvote_count=counts.get(tool_id, 0),
                user_upvoted=tool_id in voted,
                favorited=tool_id in favorited,
            )
            for tool_id in ids
        ]

    async def ranking(
        self, now: datetime, limit: int = 20, offset: int = 0
    ) -> list[tuple[str, int]]:
        async with storage_errors():
            return await self.upvote_repo.ranked_tools(now, limit=limit, offset=offset)

    async def quota_status(self, user_id: str, now: datetime) -> QuotaStatus:
        async with storage_errors():
            return await self.guard.quota_status(user_id, now)
