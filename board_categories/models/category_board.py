"""CategoryBoard ORM — one board's membership in one user's category.

Invariants:
    - (user_id, board_id) is unique: a board sits in at most one category per user
    - Always belongs to a Category (category_id FK)
    - sort_order orders boards inside the category

Design Decisions:
    - user_id denormalized: upserts find the previous membership without a join
"""

from sqlalchemy import (
    BigInteger, Boolean, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from board_categories.db.base import Base


class CategoryBoard(Base):
    """Board membership row."""
    __tablename__ = "category_boards"
    __table_args__ = (
        UniqueConstraint("user_id", "board_id", name="uq_category_boards_user_board"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    category_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    board_id: Mapped[str] = mapped_column(String(36), nullable=False)
    create_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    update_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    sort_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    hidden: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    category: Mapped["Category"] = relationship(
        "Category", back_populates="boards",
    )
