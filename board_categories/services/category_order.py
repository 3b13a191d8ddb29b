"""Category Order — validated full-set reorders of categories and of boards in a category.

Invariants:
    - A proposed order must be an exact permutation of the stored IDs:
      same length, no duplicates, no unknown IDs (checked in that order)
    - A rejected proposal is never written and never notified
    - The order returned and broadcast is the one the store reports as committed,
      not the caller's input

Design Decisions:
    - Existing IDs are re-read on every call through UserCategoryScan (no cache)
"""

import logging

from board_categories.core.domain_types import CATEGORY_PAGE_SIZE
from board_categories.core.enforce_category import (
    check_permutation, check_update_preconditions,
)
from board_categories.core.category import Category
from board_categories.core.errors import (
    BoardNotInCategoryError, DatabaseError, ErrorContext,
)
from board_categories.core.repository_protocols import CategoryStore
from board_categories.services.category_scan import UserCategoryScan
from board_categories.services.notifier import ChangeNotifier

logger = logging.getLogger(__name__)


class CategoryOrder:
    """Reorders a user's categories within a team, and boards within a category."""

    def __init__(
        self,
        store: CategoryStore,
        notifier: ChangeNotifier,
        per_page: int = CATEGORY_PAGE_SIZE,
    ):
        self.store = store
        self.notifier = notifier
        self.per_page = per_page

    async def reorder_categories(
        self, user_id: str, team_id: str, new_category_order: list[str],
    ) -> list[str]:
        await self.verify_new_categories_match_existing(
            user_id, team_id, new_category_order,
        )

        new_order = await self.store.reorder_categories(
            user_id, team_id, new_category_order,
        )
        self.notifier.categories_reordered(team_id, user_id, new_order)
        return new_order

    async def verify_new_categories_match_existing(
        self, user_id: str, team_id: str, new_category_order: list[str],
    ) -> None:
        ctx = ErrorContext(user_id=user_id, team_id=team_id)
        try:
            existing_ids = [
                category.id async for category in UserCategoryScan(
                    self.store, user_id, team_id, self.per_page,
                )
            ]
        except DatabaseError as e:
            raise DatabaseError(e.message, "fetch user categories", ctx) from e

        check_permutation(new_category_order, existing_ids, ctx)

    async def reorder_category_boards(
        self,
        user_id: str,
        team_id: str,
        category_id: str,
        new_board_order: list[str],
    ) -> list[str]:
        """Reorder the boards of one category; the category must be active and owned."""
        category = await self.store.get_category(category_id)
        check_update_preconditions(
            category, Category(id=category_id, user_id=user_id, team_id=team_id),
        )

        current_board_ids: list[str] = []
        async for category_boards in UserCategoryScan(
            self.store, user_id, team_id, self.per_page,
        ):
            if category_boards.id == category_id:
                current_board_ids = category_boards.board_ids
                break

        ctx = ErrorContext(user_id=user_id, team_id=team_id, category_id=category_id)
        check_permutation(
            new_board_order, current_board_ids, ctx,
            missing_error=BoardNotInCategoryError,
        )

        new_order = await self.store.reorder_category_boards(
            category_id, new_board_order,
        )
        self.notifier.category_boards_reordered(
            team_id, user_id, category_id, new_order,
        )
        logger.debug(
            f"Reordered {len(new_order)} board(s)",
            extra={"user_id": user_id, "team_id": team_id, "category_id": category_id},
        )
        return new_order
