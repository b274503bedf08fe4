"""Repository layer for data access."""

from toolrank.repositories.upvote_repository import UpvoteRepository
from toolrank.repositories.favorite_repository import FavoriteRepository

__all__ = [
    "UpvoteRepository",
    "FavoriteRepository",
]
