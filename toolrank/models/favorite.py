"""Favorite model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column
from toolrank.database import Base


class Favorite(Base):
    """A user's bookmark on a tool. No time window, no cap."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "tool_id", name="uq_favorites_user_tool"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    tool_id: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    def __repr__(self):
        return f"<Favorite(user_id='{self.user_id}', tool_id='{self.tool_id}')>"
