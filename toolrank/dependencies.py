"""FastAPI dependency injection providers."""

import hmac
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from toolrank.config import Settings, get_settings
from toolrank.database import get_db
from toolrank.exceptions import InvalidApiKeyError, MissingTokenError
from toolrank.limits import UpvotePolicy, get_upvote_policy
from toolrank.repositories.favorite_repository import FavoriteRepository
from toolrank.repositories.upvote_repository import UpvoteRepository
from toolrank.services.auth_service import AuthenticatedUser, get_auth_service
from toolrank.services.upvote_service import UpvoteService
from toolrank.utils.clock import Clock, get_clock
from toolrank.utils.logger import get_logger

log = get_logger(__name__)


# Type aliases for cleaner router signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
ClockDep = Annotated[Clock, Depends(get_clock)]
UpvotePolicyDep = Annotated[UpvotePolicy, Depends(get_upvote_policy)]


# Repository dependencies (request-scoped)
def get_upvote_repository(db: DbSession) -> UpvoteRepository:
    """Get UpvoteRepository with database session."""
    return UpvoteRepository(db)


def get_favorite_repository(db: DbSession) -> FavoriteRepository:
    """Get FavoriteRepository with database session."""
    return FavoriteRepository(db)


UpvoteRepoDep = Annotated[UpvoteRepository, Depends(get_upvote_repository)]
FavoriteRepoDep = Annotated[FavoriteRepository, Depends(get_favorite_repository)]


# Service dependencies
def get_upvote_service(
    db: DbSession,
    upvote_repo: UpvoteRepoDep,
    favorite_repo: FavoriteRepoDep,
    policy: UpvotePolicyDep,
) -> UpvoteService:
    """Get UpvoteService bound to the request's session."""
    return UpvoteService(db, upvote_repo=upvote_repo, favorite_repo=favorite_repo, policy=policy)


UpvoteServiceDep = Annotated[UpvoteService, Depends(get_upvote_service)]


# ============================================================================
# Authentication Dependencies
# ============================================================================


async def get_current_user_optional(
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> AuthenticatedUser | None:
    """Get current user if authenticated, None otherwise."""
    if not authorization:
        return None

    try:
        return await get_auth_service().verify_token(authorization)
    except Exception as e:
        log.debug("optional auth ignored invalid token", error=str(e))
        return None


async def get_current_user_required(
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> AuthenticatedUser:
    """Get current user, raise 401 if not authenticated."""
    if not authorization:
        raise MissingTokenError()

    return await get_auth_service().verify_token(authorization)


CurrentUserOptional = Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)]
CurrentUserRequired = Annotated[AuthenticatedUser, Depends(get_current_user_required)]


# ============================================================================
# API Key Dependencies
# ============================================================================


def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """Verify the X-Api-Key header matches the configured API key."""
    if not settings.api_key or not x_api_key:
        log.warning("ops api key rejected", reason="missing key or unconfigured")
        raise InvalidApiKeyError()
    if not hmac.compare_digest(x_api_key, settings.api_key):
        log.warning("ops api key rejected", reason="key mismatch")
        raise InvalidApiKeyError()


ApiKeyCheck = Annotated[None, Depends(verify_api_key)]
