"""Custom exception hierarchy for API error responses."""

from datetime import date
from typing import Any, Optional


class BaseAPIException(Exception):
    """Base class for exceptions rendered as structured API errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details


# ============================================================================
# Upvote quota errors
# ============================================================================


class AlreadyVotedTodayError(BaseAPIException):
    """User already holds a today-vote for this tool."""

    status_code = 409
    error_code = "ALREADY_VOTED_TODAY"

    def __init__(self, tool_id: str, message: str = "You have already upvoted this tool today"):
        super().__init__(message, details={"tool_id": tool_id})
        self.tool_id = tool_id


class DuplicateVoteError(AlreadyVotedTodayError):
    """The storage-level daily uniqueness constraint rejected the insert."""

    error_code = "DUPLICATE_VOTE"

    def __init__(self, tool_id: str):
        super().__init__(tool_id, message="An upvote for this tool already exists today")


class DailyLimitReachedError(BaseAPIException):
    """User has used all of today's upvotes across all tools."""

    status_code = 429
    error_code = "DAILY_LIMIT_REACHED"

    def __init__(self, limit: int, used: int):
        super().__init__(
            f"You can upvote up to {limit} different tools per day. "
            "Your upvotes will reset tomorrow.",
            details={"limit": limit, "used": used},
        )
        self.limit = limit
        self.used = used


class PurgeCutoffInFutureError(BaseAPIException):
    """Purge reference month is later than the current month."""

    status_code = 422
    error_code = "PURGE_CUTOFF_IN_FUTURE"

    def __init__(self, requested: date, current: date):
        super().__init__(
            "Cannot purge upvotes from the current or a future month",
            details={"cutoff": requested.isoformat(), "current_month": current.isoformat()},
        )


# ============================================================================
# Infrastructure errors
# ============================================================================


class DatabaseError(BaseAPIException):
    """Non-transient database failure."""

    status_code = 500
    error_code = "DATABASE_ERROR"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)


class StorageUnavailableError(BaseAPIException):
    """Transient storage failure; the caller may retry."""

    status_code = 503
    error_code = "STORAGE_UNAVAILABLE"

    def __init__(self, message: str = "Storage is temporarily unavailable"):
        super().__init__(message, details={"retryable": True})


# ============================================================================
# Authentication errors
# ============================================================================


class MissingTokenError(BaseAPIException):
    status_code = 401
    error_code = "MISSING_TOKEN"

    def __init__(self, message: str = "Authorization header is required"):
        super().__init__(message)


class InvalidTokenError(BaseAPIException):
    status_code = 401
    error_code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message)


class InvalidApiKeyError(BaseAPIException):
    status_code = 401
    error_code = "INVALID_API_KEY"

    def __init__(self, message: str = "Invalid or missing API key"):
        super().__init__(message)
