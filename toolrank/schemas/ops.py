"""Ops operation schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class PurgeUpvotesRequest(BaseModel):
    """Request to purge upvotes from months before ``as_of``."""

    as_of: datetime | None = Field(
        None, description="Reference instant; defaults to now. Buckets before its month are purged."
    )


class PurgeUpvotesResponse(BaseModel):
    """Response from the upvote purge."""

    deleted_count: int
    cutoff: date
