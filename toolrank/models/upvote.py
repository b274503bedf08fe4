"""Upvote ledger model."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, Index, String, func
from sqlalchemy.dialects.postgresql import UUID, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column
from toolrank.database import Base


class Upvote(Base):
    """One user's upvote of one tool at one instant.

    ``monthly_reset_date`` is the first day of the UTC month of ``upvoted_at``.
    It is written once at insert and is what monthly counts and the purge
    filter on.
    """

    __tablename__ = "upvotes"
    __table_args__ = (
        Index("ix_upvotes_tool_month", "tool_id", "monthly_reset_date"),
        Index("ix_upvotes_user_upvoted_at", "user_id", "upvoted_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    tool_id: Mapped[str] = mapped_column(String(255), nullable=False)
    upvoted_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    monthly_reset_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    def __repr__(self):
        return (
            f"<Upvote(user_id='{self.user_id}', tool_id='{self.tool_id}', "
            f"upvoted_at='{self.upvoted_at}', bucket='{self.monthly_reset_date}')>"
        )


# One upvote per (user, tool, UTC day). timezone('UTC', timestamptz) is
# immutable, so Postgres accepts it in an index expression.
Index(
    "uq_upvotes_user_tool_day",
    Upvote.user_id,
    Upvote.tool_id,
    func.date(func.timezone("UTC", Upvote.upvoted_at)),
    unique=True,
)
