"""Category Lifecycle — create, update, delete and read a user's categories.

Invariants:
    - Every mutation is: validate -> store write -> canonical re-read -> notify
    - A failed re-read fails the operation; nothing is notified for it
    - update never changes type; system categories keep their name and stay active
    - delete is idempotent: an already-deleted category is returned as stored,
      with no write and no notification
    - System categories are never deleted
    - Boards of a deleted category are moved to the default category BEFORE the
      soft delete; a failed move aborts the delete
    - Every (user, team) scope read through get_user_category_boards has exactly one
      default category: the system category named DEFAULT_CATEGORY_NAME
    - A custom category can never take the default name
    - The category being deleted is never its own board destination

Design Decisions:
    - Read-modify-write guarded by update_at compare-and-set in the store
      (ConcurrencyError on a lost race) instead of in-process locks
    - Store DatabaseErrors from multi-step operations are re-raised with the
      operation name; domain errors propagate unchanged
"""

import logging

from board_categories.core.category import (
    BoardCategoryChange, Category, CategoryBoards, get_millis,
)
from board_categories.core.domain_types import (
    CATEGORY_PAGE_SIZE, CategoryType, DEFAULT_CATEGORY_NAME,
)
from board_categories.core.enforce_category import (
    apply_system_category_policy,
    check_delete_preconditions,
    check_reserved_name,
    check_update_preconditions,
)
from board_categories.core.errors import (
    CategoryNotFoundError,
    DatabaseError,
    ErrorContext,
    IntegrityConflictError,
    NoDefaultCategoryError,
)
from board_categories.core.repository_protocols import CategoryStore
from board_categories.services.category_scan import UserCategoryScan
from board_categories.services.notifier import ChangeNotifier

logger = logging.getLogger(__name__)


class CategoryLifecycle:
    """Single-category operations with ownership and system-category rules."""

    def __init__(
        self,
        store: CategoryStore,
        notifier: ChangeNotifier,
        per_page: int = CATEGORY_PAGE_SIZE,
    ):
        self.store = store
        self.notifier = notifier
        self.per_page = per_page

    async def get_category(self, category_id: str) -> Category:
        return await self.store.get_category(category_id)

    async def create_category(self, category: Category) -> Category:
        """Hydrate, validate and persist a new category."""
        category.hydrate()
        category.validate()
        check_reserved_name(category)

        await self.store.create_category(category)
        created = await self.store.get_category(category.id)

        self.notifier.category_changed(created)
        logger.info(
            f"Category {created.id} created",
            extra={
                "user_id": created.user_id, "team_id": created.team_id,
                "category_id": created.id,
            },
        )
        return created

    async def update_category(self, category: Category) -> Category:
        """Update name and presentation fields of an existing category."""
        category.hydrate()
        category.validate()

        existing = await self.store.get_category(category.id)
        check_update_preconditions(existing, category)
        apply_system_category_policy(category, existing)
        check_reserved_name(category)

        category.update_at = get_millis()
        category.validate()
        await self.store.update_category(
            category, expected_update_at=existing.update_at,
        )

        updated = await self.store.get_category(category.id)
        self.notifier.category_changed(updated)
        return updated

    async def delete_category(
        self, category_id: str, user_id: str, team_id: str,
    ) -> Category:
        """Soft-delete a custom category after moving its boards to the default one."""
        existing = await self.store.get_category(category_id)
        if existing.is_deleted:
            return existing

        check_delete_preconditions(existing, user_id, team_id)

        await self.move_boards_to_default_category(user_id, team_id, category_id)
        await self.store.delete_category(category_id, user_id, team_id)

        deleted = await self.store.get_category(category_id)
        self.notifier.category_changed(deleted)
        logger.info(
            f"Category {category_id} deleted",
            extra={
                "user_id": user_id, "team_id": team_id,
                "category_id": category_id,
            },
        )
        return deleted

    async def move_boards_to_default_category(
        self, user_id: str, team_id: str, source_category_id: str,
    ) -> None:
        """Reassign every board of source_category_id to the scope's default category."""
        ctx = ErrorContext(user_id=user_id, team_id=team_id)
        source: CategoryBoards | None = None
        default_category_id = ""

        try:
            async for category in UserCategoryScan(
                self.store, user_id, team_id, self.per_page,
            ):
                if category.id == source_category_id:
                    source = category
                elif category.is_default:
                    default_category_id = category.id
                if source is not None and default_category_id:
                    break
        except DatabaseError as e:
            raise DatabaseError(
                e.message, "move_boards_to_default_category", ctx,
            ) from e

        if source is None:
            raise CategoryNotFoundError(source_category_id, ctx)
        if not default_category_id:
            logger.critical(
                "No default category in scope",
                extra={"user_id": user_id, "team_id": team_id},
            )
            raise NoDefaultCategoryError(ctx)

        try:
            await self.add_update_user_category_board(
                team_id, user_id, default_category_id, source.board_ids,
            )
        except DatabaseError as e:
            raise DatabaseError(
                e.message, "move_boards_to_default_category", ctx,
            ) from e

    async def add_update_user_category_board(
        self, team_id: str, user_id: str, category_id: str, board_ids: list[str],
    ) -> None:
        """Place boards in category_id for this user. No-op for an empty list."""
        if not board_ids:
            return

        await self.store.add_update_user_category_board(
            team_id, user_id, category_id, board_ids,
        )
        self.notifier.boards_categorized(
            team_id, user_id,
            [
                BoardCategoryChange(board_id=board_id, category_id=category_id)
                for board_id in board_ids
            ],
        )

    async def get_user_category_boards(
        self, user_id: str, team_id: str,
    ) -> list[CategoryBoards]:
        """All active categories with their boards; creates the default category if missing."""
        scan = UserCategoryScan(self.store, user_id, team_id, self.per_page)
        categories = await scan.collect()
        if any(c.is_default for c in categories):
            return categories

        logger.info(
            "Creating default category",
            extra={"user_id": user_id, "team_id": team_id},
        )
        try:
            created = await self.create_category(Category(
                name=DEFAULT_CATEGORY_NAME,
                user_id=user_id,
                team_id=team_id,
                type=CategoryType.SYSTEM.value,
                sort_order=0,
            ))
        except IntegrityConflictError:
            # Another request created the default between our scan and insert
            categories = await scan.collect()
            if not any(c.is_default for c in categories):
                raise
            logger.info(
                "Default category created concurrently",
                extra={"user_id": user_id, "team_id": team_id},
            )
            return categories
        return [CategoryBoards(**created.to_dict()), *categories]
