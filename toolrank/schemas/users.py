"""User schemas."""

from datetime import datetime

from pydantic import BaseModel


class UpvoteQuotaResponse(BaseModel):
    """Caller's remaining daily upvotes and when the windows roll over."""

    limit: int
    used: int
    remaining: int
    daily_reset_at: datetime
    monthly_reset_at: datetime
