"""Create categories and category_boards tables.

Revision ID: 001_categories
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_categories"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("team_id", sa.String(36), nullable=False),
        sa.Column("create_at", sa.BigInteger, nullable=False),
        sa.Column("update_at", sa.BigInteger, nullable=False),
        sa.Column("delete_at", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("collapsed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("sorting", sa.String(50), nullable=False, server_default=""),
        sa.Column("type", sa.String(10), nullable=False, server_default="custom"),
    )
    op.create_index(
        "idx_categories_user_team", "categories",
        ["user_id", "team_id", "delete_at"],
    )
    op.create_table(
        "category_boards",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column(
            "category_id", sa.String(36),
            sa.ForeignKey("categories.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("board_id", sa.String(36), nullable=False),
        sa.Column("create_at", sa.BigInteger, nullable=False),
        sa.Column("update_at", sa.BigInteger, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("hidden", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("user_id", "board_id", name="uq_category_boards_user_board"),
    )
    op.create_index(
        "ix_category_boards_category_id", "category_boards", ["category_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_category_boards_category_id", table_name="category_boards")
    op.drop_table("category_boards")
    op.drop_index("idx_categories_user_team", table_name="categories")
    op.drop_table("categories")
