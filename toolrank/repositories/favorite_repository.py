"""Repository for Favorite model operations."""

import uuid
from typing import Iterable

from sqlalchemy import delete, exists, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from toolrank.models.favorite import Favorite
from toolrank.utils.logger import get_logger

log = get_logger(__name__)


class FavoriteRepository:
    """Repository for idempotent favorite toggling."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def set_favorite(self, user_id: str, tool_id: str, desired: bool) -> bool:
        """
        Make the favorite state of (user, tool) equal ``desired``.

        Favoriting an already-favorited tool and unfavoriting a tool that was
        never favorited are both no-ops.

        Caller is responsible for committing the transaction.

        Returns:
            The resulting favorited state
        """
        if desired:
            result = await self.session.execute(
                pg_insert(Favorite)
                .values(id=uuid.uuid4(), user_id=user_id, tool_id=tool_id)
                .on_conflict_do_nothing(index_elements=["user_id", "tool_id"])
            )
        else:
            result = await self.session.execute(
                delete(Favorite).where(
                    Favorite.user_id == user_id,
                    Favorite.tool_id == tool_id,
                )
            )

        log.debug(
            "favorite set",
            user_id=user_id,
            tool_id=tool_id,
            favorited=desired,
            changed=result.rowcount,
        )
        return desired

    async def is_favorited(self, user_id: str, tool_id: str) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    Favorite.user_id == user_id,
                    Favorite.tool_id == tool_id,
                )
            )
        )
        return bool(result.scalar_one())

    async def favorited_batch(self, user_id: str, tool_ids: Iterable[str]) -> set[str]:
        """Subset of ``tool_ids`` the user has favorited, in one query."""
        ids = list(dict.fromkeys(tool_ids))
        if not ids:
            return set()

        result = await self.session.execute(
            select(Favorite.tool_id).where(
                Favorite.user_id == user_id,
                Favorite.tool_id.in_(ids),
            )
        )
        return {row[0] for row in result.fetchall()}
