"""Favorite schemas."""

from pydantic import BaseModel


class FavoriteResponse(BaseModel):
    """Favorite state of a tool for the caller."""

    favorited: bool
