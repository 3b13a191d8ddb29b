"""ORM Models — SQLAlchemy declarative models for categories and board memberships.

Invariants:
    - All models inherit from Base (db/base.py)
    - Category is the aggregate root; memberships are scoped by category_id

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from board_categories.models.category import Category  # noqa: F401
from board_categories.models.category_board import CategoryBoard  # noqa: F401
