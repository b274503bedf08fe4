"""Repository for the upvote ledger.

All counts are derived from ledger rows on every call; nothing is cached on the
tool. Daily queries use ``upvoted_at`` within the UTC day, monthly queries use
equality on the ``monthly_reset_date`` bucket tag.
"""

import uuid
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy import Date, String, delete, exists, func, literal, select, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID, insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from toolrank.config import get_settings
from toolrank.exceptions import DailyLimitReachedError, DuplicateVoteError
from toolrank.models.upvote import Upvote
from toolrank.utils.logger import get_logger
from toolrank.utils.time_windows import day_end, day_start, month_start, to_utc

log = get_logger(__name__)


class UpvoteRepository:
    """Repository for upvote ledger reads, guarded inserts and purges."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _today(self, now: datetime):
        start, end = day_start(now), day_end(now)
        return Upvote.upvoted_at >= start, Upvote.upvoted_at < end

    async def _lock_user(self, user_id: str) -> None:
        """Serialize concurrent casts by the same user until the transaction ends."""
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:user_id))"),
            {"user_id": user_id},
        )

    async def cast_upvote(
        self, user_id: str, tool_id: str, now: datetime, daily_limit: int
    ) -> int:
        """Insert today's upvote for (user, tool) and return the tool's visible count.

        The row is written by a single ``INSERT ... SELECT ... WHERE`` whose
        predicate re-counts the user's upvotes for today, and ``ON CONFLICT DO
        NOTHING`` lets the unique day index reject a same-day duplicate. When
        nothing is inserted the cause is looked up afterwards.

        Caller is responsible for committing the transaction.

        Raises:
            DuplicateVoteError: A today-row for (user, tool) already exists
            DailyLimitReachedError: The user already holds ``daily_limit`` upvotes today
        """
        await self._lock_user(user_id)

        todays_count = (
            select(func.count())
            .select_from(Upvote)
            .where(Upvote.user_id == user_id, *self._today(now))
            .correlate(None)
            .scalar_subquery()
        )
        source = select(
            literal(uuid.uuid4(), UUID(as_uuid=True)),
            literal(user_id, String),
            literal(tool_id, String),
            literal(to_utc(now), TIMESTAMP(timezone=True)),
            literal(month_start(now), Date),
        ).where(todays_count < daily_limit)

        stmt = (
            pg_insert(Upvote)
            .from_select(
                ["id", "user_id", "tool_id", "upvoted_at", "monthly_reset_date"],
                source,
            )
            .on_conflict_do_nothing()
            .returning(Upvote.id)
        )
        result = await self.session.execute(stmt)
        inserted_id = result.scalar_one_or_none()

        if inserted_id is None:
            if await self.has_voted_today(user_id, tool_id, now):
                log.info("upvote rejected", reason="duplicate", user_id=user_id, tool_id=tool_id)
                raise DuplicateVoteError(tool_id)
            used = await self.todays_vote_count(user_id, now)
            log.info(
                "upvote rejected",
                reason="daily_limit",
                user_id=user_id,
                tool_id=tool_id,
                used=used,
            )
            raise DailyLimitReachedError(limit=daily_limit, used=used)

        log.debug("upvote inserted", upvote_id=str(inserted_id), user_id=user_id, tool_id=tool_id)
        return await self.visible_count(tool_id, now)

    async def retract_upvote(
        self, user_id: str, tool_id: str, now: datetime
    ) -> tuple[int, bool]:
        """Delete today's upvote for (user, tool), if any.

        Votes from earlier days are never touched. Missing rows are a no-op.

        Returns:
            Tuple of (visible count, whether a today-vote still exists), both
            re-read after the delete.
        """
        result = await self.session.execute(
            delete(Upvote).where(
                Upvote.user_id == user_id,
                Upvote.tool_id == tool_id,
                *self._today(now),
            )
        )
        log.debug(
            "upvote retracted",
            user_id=user_id,
            tool_id=tool_id,
            deleted=result.rowcount,
        )

        count = await self.visible_count(tool_id, now)
        still_voted = await self.has_voted_today(user_id, tool_id, now)
        return count, still_voted

    async def visible_count(self, tool_id: str, now: datetime) -> int:
        """Count of the tool's upvotes in the current month's bucket."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Upvote)
            .where(
                Upvote.tool_id == tool_id,
                Upvote.monthly_reset_date == month_start(now),
            )
        )
        return result.scalar_one()

    async def visible_counts(self, tool_ids: Iterable[str], now: datetime) -> dict[str, int]:
        """Visible counts for many tools in one grouped query. Missing tools map to 0."""
        ids = list(dict.fromkeys(tool_ids))
        if not ids:
            return {}

        result = await self.session.execute(
            select(Upvote.tool_id, func.count())
            .where(
                Upvote.tool_id.in_(ids),
                Upvote.monthly_reset_date == month_start(now),
            )
            .group_by(Upvote.tool_id)
        )
        counts = {tool_id: 0 for tool_id in ids}
        for tool_id, count in result.fetchall():
            counts[tool_id] = count
        return counts

    async def has_voted_today(self, user_id: str, tool_id: str, now: datetime) -> bool:
        """Whether the user holds an upvote for the tool within today's UTC window."""
        result = await self.session.execute(
            select(
                exists().where(
                    Upvote.user_id == user_id,
                    Upvote.tool_id == tool_id,
                    *self._today(now),
                )
            )
        )
        return bool(result.scalar_one())

    async def has_voted_today_batch(
        self, user_id: str, tool_ids: Iterable[str], now: datetime
    ) -> set[str]:
        """Subset of ``tool_ids`` the user has upvoted today, in one query."""
        ids = list(dict.fromkeys(tool_ids))
        if not ids:
            return set()

        result = await self.session.execute(
            select(Upvote.tool_id)
            .distinct()
            .where(
                Upvote.user_id == user_id,
                Upvote.tool_id.in_(ids),
                *self._today(now),
            )
        )
        return {row[0] for row in result.fetchall()}

    async def todays_vote_count(self, user_id: str, now: datetime) -> int:
        """Number of upvotes the user cast today across all tools."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Upvote)
            .where(Upvote.user_id == user_id, *self._today(now))
        )
        return result.scalar_one()

    async def ranked_tools(
        self, now: datetime, limit: int = 20, offset: int = 0
    ) -> list[tuple[str, int]]:
        """This month's leaderboard as (tool_id, visible count), highest first."""
        upvote_count = func.count().label("upvote_count")
        result = await self.session.execute(
            select(Upvote.tool_id, upvote_count)
            .where(Upvote.monthly_reset_date == month_start(now))
            .group_by(Upvote.tool_id)
            .order_by(upvote_count.desc(), Upvote.tool_id.asc())
            .limit(limit)
            .offset(offset)
        )
        return [(tool_id, count) for tool_id, count in result.fetchall()]

    async def purge_older_than(
        self, current_month_start: date, batch_size: Optional[int] = None
    ) -> int:
        """Delete upvotes whose bucket predates ``current_month_start``.

        Deletes in id batches and commits after each one so the purge never
        holds a long transaction. Run it on a session of its own.

        Returns:
            Total number of rows deleted.
        """
        batch_size = batch_size or get_settings().purge_batch_size
        total_deleted = 0

        while True:
            id_result = await self.session.execute(
                select(Upvote.id)
                .where(Upvote.monthly_reset_date < current_month_start)
                .limit(batch_size)
            )
            ids = [row[0] for row in id_result.fetchall()]

            if not ids:
                break

            await self.session.execute(delete(Upvote).where(Upvote.id.in_(ids)))
            await self.session.commit()
            total_deleted += len(ids)

            log.debug(
                "upvote purge batch",
                cutoff=current_month_start.isoformat(),
                batch_count=len(ids),
                total_deleted=total_deleted,
            )

        return total_deleted
