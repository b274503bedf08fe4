"""Create upvotes and favorites tables.

Revision ID: 001_create_upvotes_and_favorites
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_create_upvotes_and_favorites"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create upvotes (with the one-per-day unique index) and favorites."""
    op.create_table(
        "upvotes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("tool_id", sa.String(255), nullable=False),
        sa.Column(
            "upvoted_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("monthly_reset_date", sa.Date, nullable=False),
    )
    op.create_index(
        "uq_upvotes_user_tool_day",
        "upvotes",
        ["user_id", "tool_id", sa.text("date(timezone('UTC', upvoted_at))")],
        unique=True,
    )
    op.create_index("ix_upvotes_tool_month", "upvotes", ["tool_id", "monthly_reset_date"])
    op.create_index("ix_upvotes_user_upvoted_at", "upvotes", ["user_id", "upvoted_at"])
    op.create_index("ix_upvotes_monthly_reset_date", "upvotes", ["monthly_reset_date"])

    op.create_table(
        "favorites",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("tool_id", sa.String(255), nullable=False),
        sa.Column(
            "created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now()
        ),
        sa.UniqueConstraint("user_id", "tool_id", name="uq_favorites_user_tool"),
    )
    op.create_index("ix_favorites_user_id", "favorites", ["user_id"])


def downgrade() -> None:
    """Drop favorites and upvotes."""
    op.drop_index("ix_favorites_user_id", table_name="favorites")
    op.drop_table("favorites")
    op.drop_index("ix_upvotes_monthly_reset_date", table_name="upvotes")
    op.drop_index("ix_upvotes_user_upvoted_at", table_name="upvotes")
    op.drop_index("ix_upvotes_tool_month", table_name="upvotes")
    op.drop_index("uq_upvotes_user_tool_day", table_name="upvotes")
    op.drop_table("upvotes")
