"""SQL Category Store — CategoryStore implementation on SQLAlchemy async sessions.

Invariants:
    - Each public method runs in its own session and commits once (single-call atomicity)
    - Reads return domain dataclasses (core/category.py), never ORM rows
    - update_category with expected_update_at is a compare-and-set on update_at
    - delete_category only soft-deletes active rows owned by (user_id, team_id)
    - Categories are listed by (sort_order, name, id); boards by sort_order

Design Decisions:
    - Reorders written as one UPDATE with a CASE expression, then re-read: the
      returned order is what the database holds after commit
    - Board upsert keyed on (user_id, board_id): moving a board into a category
      removes it from the previous one in the same statement batch
"""

import logging

from sqlalchemy import case, func, select, update

from board_categories.core.category import (
    Category, CategoryBoardMetadata, CategoryBoards, get_millis, new_id,
)
from board_categories.core.domain_types import SORT_ORDER_STEP
from board_categories.core.errors import (
    CategoryNotFoundError, ConcurrencyError, ErrorContext,
)
from board_categories.infrastructure.database import DatabaseSessionManager
from board_categories.models.category import Category as CategoryModel
from board_categories.models.category_board import CategoryBoard as CategoryBoardModel

logger = logging.getLogger(__name__)

_CATEGORY_FIELDS = (
    "id", "name", "user_id", "team_id", "create_at", "update_at",
    "delete_at", "collapsed", "sort_order", "sorting", "type",
)


def _to_category(row: CategoryModel) -> Category:
    return Category(**{name: getattr(row, name) for name in _CATEGORY_FIELDS})


def _to_category_boards(row: CategoryModel) -> CategoryBoards:
    return CategoryBoards(
        **{name: getattr(row, name) for name in _CATEGORY_FIELDS},
        board_metadata=[
            CategoryBoardMetadata(board_id=b.board_id, hidden=b.hidden)
            for b in row.boards
        ],
    )


def _sort_order_case(column, ordered_ids: list[str]):
    return case(
        {item_id: i * SORT_ORDER_STEP for i, item_id in enumerate(ordered_ids)},
        value=column,
    )


class SqlCategoryStore:
    """Category persistence backed by the categories and category_boards tables."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def get_category(self, category_id: str) -> Category:
        async with self._db.session("get_category") as db:
            result = await db.execute(
                select(CategoryModel).where(CategoryModel.id == category_id),
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise CategoryNotFoundError(category_id)
            return _to_category(row)

    async def create_category(self, category: Category) -> None:
        async with self._db.session("create_category") as db:
            db.add(CategoryModel(
                **{name: getattr(category, name) for name in _CATEGORY_FIELDS},
            ))
            await db.commit()

    async def update_category(
        self, category: Category, expected_update_at: int | None = None,
    ) -> None:
        """Write the mutable columns. id, user_id, team_id and create_at never change."""
        stmt = (
            update(CategoryModel)
            .where(CategoryModel.id == category.id)
            .execution_options(synchronize_session=False)
        )
        if expected_update_at is not None:
            stmt = stmt.where(CategoryModel.update_at == expected_update_at)
        stmt = stmt.values(
            name=category.name,
            update_at=category.update_at,
            delete_at=category.delete_at,
            collapsed=category.collapsed,
            sort_order=category.sort_order,
            sorting=category.sorting,
            type=category.type,
        )
        async with self._db.session("update_category") as db:
            result = await db.execute(stmt)
            if result.rowcount == 0:
                ctx = ErrorContext(
                    user_id=category.user_id, team_id=category.team_id,
                    category_id=category.id,
                )
                if expected_update_at is None:
                    raise CategoryNotFoundError(category.id, ctx)
                raise ConcurrencyError(
                    f"Category '{category.id}' was modified by another request",
                    ctx,
                )
            await db.commit()

    async def delete_category(
        self, category_id: str, user_id: str, team_id: str,
    ) -> None:
        now = get_millis()
        async with self._db.session("delete_category") as db:
            await db.execute(
                update(CategoryModel)
                .where(CategoryModel.id == category_id)
                .where(CategoryModel.user_id == user_id)
                .where(CategoryModel.team_id == team_id)
                .where(CategoryModel.delete_at == 0)
                .values(delete_at=now, update_at=now),
            )
            await db.commit()

    async def get_user_categories(
        self, user_id: str, team_id: str, page: int, per_page: int,
    ) -> list[CategoryBoards]:
        query = (
            select(CategoryModel)
            .where(CategoryModel.user_id == user_id)
            .where(CategoryModel.team_id == team_id)
            .where(CategoryModel.delete_at == 0)
            .order_by(
                CategoryModel.sort_order, CategoryModel.name, CategoryModel.id,
            )
            .offset(page * per_page)
            .limit(per_page)
        )
        async with self._db.session("get_user_categories") as db:
            result = await db.execute(query)
            return [_to_category_boards(row) for row in result.scalars().all()]

    async def reorder_categories(
        self, user_id: str, team_id: str, new_category_order: list[str],
    ) -> list[str]:
        async with self._db.session("reorder_categories") as db:
            if new_category_order:
                await db.execute(
                    update(CategoryModel)
                    .where(CategoryModel.user_id == user_id)
                    .where(CategoryModel.team_id == team_id)
                    .where(CategoryModel.id.in_(new_category_order))
                    .execution_options(synchronize_session=False)
                    .values(
                        sort_order=_sort_order_case(
                            CategoryModel.id, new_category_order,
                        ),
                        update_at=get_millis(),
                    ),
                )
            await db.commit()
            result = await db.execute(
                select(CategoryModel.id)
                .where(CategoryModel.user_id == user_id)
                .where(CategoryModel.team_id == team_id)
                .where(CategoryModel.delete_at == 0)
                .order_by(
                    CategoryModel.sort_order, CategoryModel.name, CategoryModel.id,
                ),
            )
            return list(result.scalars().all())

    async def add_update_user_category_board(
        self, team_id: str, user_id: str, category_id: str, board_ids: list[str],
    ) -> None:
        """Move boards into category_id, appended after its current boards in the given order."""
        board_ids = list(dict.fromkeys(board_ids))
        now = get_millis()
        async with self._db.session("add_update_user_category_board") as db:
            result = await db.execute(
                select(CategoryBoardModel)
                .where(CategoryBoardModel.user_id == user_id)
                .where(CategoryBoardModel.board_id.in_(board_ids)),
            )
            by_board = {row.board_id: row for row in result.scalars().all()}

            max_order = await db.scalar(
                select(func.max(CategoryBoardModel.sort_order))
                .where(CategoryBoardModel.category_id == category_id)
                .where(CategoryBoardModel.board_id.not_in(board_ids)),
            )
            next_order = 0 if max_order is None else max_order + SORT_ORDER_STEP

            for board_id in board_ids:
                row = by_board.get(board_id)
                if row is None:
                    row = CategoryBoardModel(
                        id=new_id(), user_id=user_id, board_id=board_id,
                        create_at=now, hidden=False,
                    )
                    db.add(row)
                row.category_id = category_id
                row.update_at = now
                row.sort_order = next_order
                next_order += SORT_ORDER_STEP
            await db.commit()
        logger.debug(
            f"Assigned {len(board_ids)} board(s) to category {category_id}",
            extra={"user_id": user_id, "team_id": team_id, "category_id": category_id},
        )

    async def reorder_category_boards(
        self, category_id: str, new_board_order: list[str],
    ) -> list[str]:
        async with self._db.session("reorder_category_boards") as db:
            if new_board_order:
                await db.execute(
                    update(CategoryBoardModel)
                    .where(CategoryBoardModel.category_id == category_id)
                    .where(CategoryBoardModel.board_id.in_(new_board_order))
                    .execution_options(synchronize_session=False)
                    .values(
                        sort_order=_sort_order_case(
                            CategoryBoardModel.board_id, new_board_order,
                        ),
                        update_at=get_millis(),
                    ),
                )
            await db.commit()
            result = await db.execute(
                select(CategoryBoardModel.board_id)
                .where(CategoryBoardModel.category_id == category_id)
                .order_by(CategoryBoardModel.sort_order, CategoryBoardModel.board_id),
            )
            return list(result.scalars().all())
