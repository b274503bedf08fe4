"""Ops operations router."""

from fastapi import APIRouter

from toolrank.dependencies import ApiKeyCheck, ClockDep
from toolrank.schemas.ops import PurgeUpvotesRequest, PurgeUpvotesResponse
from toolrank.services.maintenance_service import purge_stale_upvotes, resolve_purge_cutoff
from toolrank.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/ops", tags=["Ops"])


@router.post("/upvotes/purge", response_model=PurgeUpvotesResponse)
async def purge_upvotes(
    _api_key: ApiKeyCheck,
    clock: ClockDep,
    request: PurgeUpvotesRequest | None = None,
) -> PurgeUpvotesResponse:
    """
    Permanently delete upvotes from months before the current one.

    Intended for an external scheduler or an administrator. Monthly counts
    already ignore old buckets, so skipping this only costs storage. An
    ``as_of`` in a later month than now is rejected with 422.
    """
    now = clock()
    as_of = request.as_of if request and request.as_of else now
    log.info("upvote purge requested", as_of=as_of.isoformat())

    resolve_purge_cutoff(as_of, now)
    result = await purge_stale_upvotes(as_of, now=now)

    return PurgeUpvotesResponse(deleted_count=result.deleted_count, cutoff=result.cutoff)
