"""Database models."""

from toolrank.models.upvote import Upvote
from toolrank.models.favorite import Favorite

__all__ = [
    "Upvote",
    "Favorite",
]
