"""Storage maintenance for the upvote ledger."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from toolrank.config import get_settings
from toolrank.database import AsyncSessionLocal, storage_errors
from toolrank.exceptions import PurgeCutoffInFutureError
from toolrank.repositories.upvote_repository import UpvoteRepository
from toolrank.utils.clock import utc_now
from toolrank.utils.logger import get_logger
from toolrank.utils.time_windows import month_start

log = get_logger(__name__)


@dataclass
class PurgeResult:
    deleted_count: int
    cutoff: date


def resolve_purge_cutoff(as_of: datetime, now: datetime) -> date:
    """Bucket cutoff for a purge as of ``as_of``.

    The cutoff may never pass the current month's bucket: rows in it are
    still counted.

    Raises:
        PurgeCutoffInFutureError: ``as_of`` lies in a month after ``now``'s
    """
    cutoff = month_start(as_of)
    current = month_start(now)
    if cutoff > current:
        log.warning("upvote purge rejected", cutoff=cutoff.isoformat(), current_month=current.isoformat())
        raise PurgeCutoffInFutureError(requested=cutoff, current=current)
    return cutoff


async def purge_stale_upvotes(
    as_of: datetime,
    batch_size: Optional[int] = None,
    now: Optional[datetime] = None,
) -> PurgeResult:
    """Delete upvotes whose monthly bucket predates the month of ``as_of``.

    Runs on a dedicated session so the batched deletes never share a
    transaction with request-serving reads. Visible counts do not depend on
    this ever running.

    Returns:
        PurgeResult with the number of rows removed and the bucket cutoff
    """
    cutoff = resolve_purge_cutoff(as_of, now or utc_now())
    batch_size = batch_size or get_settings().purge_batch_size

    log.info("upvote_purge_started", cutoff=cutoff.isoformat(), batch_size=batch_size)

    async with storage_errors():
        async with AsyncSessionLocal() as session:
            deleted = await UpvoteRepository(session).purge_older_than(cutoff, batch_size)

    log.info("upvote_purge_completed", cutoff=cutoff.isoformat(), deleted_count=deleted)
    return PurgeResult(deleted_count=deleted, cutoff=cutoff)
