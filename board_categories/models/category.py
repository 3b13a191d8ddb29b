"""Category ORM — persists one category row per (user, team) grouping.

Invariants:
    - id is a caller-generated string primary key (core.category.new_id)
    - user_id, team_id and create_at are written once on insert
    - delete_at == 0 means active (soft delete, rows are never removed)
    - sort_order is rewritten in steps of 10 by reorder

Design Decisions:
    - BigInteger millisecond timestamps: same values the domain dataclass carries
    - Composite index on (user_id, team_id, delete_at): every scan filters on it
    - Partial unique index: at most one active system category per (user_id, team_id)
"""

from sqlalchemy import BigInteger, Boolean, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from board_categories.db.base import Base

_ACTIVE_SYSTEM = "type = 'system' AND delete_at = 0"


class Category(Base):
    """Category row — owns its board memberships."""
    __tablename__ = "categories"
    __table_args__ = (
        Index("idx_categories_user_team", "user_id", "team_id", "delete_at"),
        Index(
            "uq_categories_default_per_scope", "user_id", "team_id",
            unique=True,
            postgresql_where=text(_ACTIVE_SYSTEM),
            sqlite_where=text(_ACTIVE_SYSTEM),
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    team_id: Mapped[str] = mapped_column(String(36), nullable=False)
    create_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    update_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    delete_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    collapsed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    sort_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    sorting: Mapped[str] = mapped_column(
        String(50), nullable=False, default="",
    )
    type: Mapped[str] = mapped_column(
        String(10), nullable=False, default="custom",
    )

    # Relationships
    boards: Mapped[list["CategoryBoard"]] = relationship(
        "CategoryBoard", back_populates="category",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="CategoryBoard.sort_order",
    )
