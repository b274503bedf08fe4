"""Favorite router."""

from fastapi import APIRouter

from toolrank.dependencies import CurrentUserOptional, CurrentUserRequired, UpvoteServiceDep
from toolrank.routers.upvotes import ToolId
from toolrank.schemas.favorites import FavoriteResponse

router = APIRouter(prefix="/tools", tags=["Favorites"])


@router.get("/{tool_id}/favorite", response_model=FavoriteResponse)
async def get_favorite(
    tool_id: ToolId,
    current_user: CurrentUserOptional,
    service: UpvoteServiceDep,
) -> FavoriteResponse:
    """Whether the caller has favorited the tool. Anonymous callers get false."""
    if current_user is None:
        return FavoriteResponse(favorited=False)
    return FavoriteResponse(favorited=await service.is_favorited(current_user.user_id, tool_id))


@router.post("/{tool_id}/favorite", response_model=FavoriteResponse)
async def favorite_tool(
    tool_id: ToolId,
    current_user: CurrentUserRequired,
    service: UpvoteServiceDep,
) -> FavoriteResponse:
    """Favorite a tool. Idempotent."""
    favorited = await service.set_favorite(current_user.user_id, tool_id, True)
    return FavoriteResponse(favorited=favorited)


@router.delete("/{tool_id}/favorite", response_model=FavoriteResponse)
async def unfavorite_tool(
    tool_id: ToolId,
    current_user: CurrentUserRequired,
    service: UpvoteServiceDep,
) -> FavoriteResponse:
    """Remove a favorite. Idempotent."""
    favorited = await service.set_favorite(current_user.user_id, tool_id, False)
    return FavoriteResponse(favorited=favorited)
