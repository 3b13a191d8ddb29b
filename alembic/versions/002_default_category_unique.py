"""One active system category per (user, team).

Revision ID: 002_default_category_unique
Revises: 001_categories
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002_default_category_unique"
down_revision: Union[str, None] = "001_categories"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ACTIVE_SYSTEM = "type = 'system' AND delete_at = 0"


def upgrade() -> None:
    op.create_index(
        "uq_categories_default_per_scope", "categories",
        ["user_id", "team_id"],
        unique=True,
        postgresql_where=sa.text(_ACTIVE_SYSTEM),
        sqlite_where=sa.text(_ACTIVE_SYSTEM),
    )


def downgrade() -> None:
    op.drop_index("uq_categories_default_per_scope", table_name="categories")
