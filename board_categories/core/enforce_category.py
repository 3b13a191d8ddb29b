"""Category Rule Enforcement — pure checks applied before any category write.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Raise a BoardsError subclass on violation, return None on success
    - Checks run in a fixed order; the first violation wins

Design Decisions:
    - Raise (not return dicts): services propagate errors unchanged to the API layer
    - System category overrides are one named policy function, so tests can assert
      exactly which fields the policy resets
"""

from collections.abc import Callable, Iterable

from board_categories.core.category import Category
from board_categories.core.domain_types import DEFAULT_CATEGORY_NAME
from board_categories.core.errors import (
    BoardsError,
    CannotDeleteSystemCategoryError,
    CategoriesLengthMismatchError,
    CategoryDeletedError,
    CategoryNotFoundError,
    CategoryPermissionDeniedError,
    DuplicateCategoryIdError,
    ErrorContext,
    InvalidCategoryError,
)


def _scope(user_id: str, team_id: str, category_id: str | None = None) -> ErrorContext:
    return ErrorContext(user_id=user_id, team_id=team_id, category_id=category_id)


def check_update_preconditions(existing: Category, candidate: Category) -> None:
    """Existing category must be active and owned by the candidate's user and team."""
    ctx = _scope(candidate.user_id, candidate.team_id, existing.id)
    if existing.is_deleted:
        raise CategoryDeletedError(ctx)
    if existing.user_id != candidate.user_id:
        raise CategoryPermissionDeniedError(ctx)
    if existing.team_id != candidate.team_id:
        raise CategoryPermissionDeniedError(ctx)


def check_delete_preconditions(
    existing: Category, user_id: str, team_id: str,
) -> None:
    """Caller must own the category, in the same team, and it must not be a system one.

    Already-deleted categories are handled by the caller before this check.
    """
    ctx = _scope(user_id, team_id, existing.id)
    if existing.user_id != user_id:
        raise CategoryPermissionDeniedError(ctx)
    if existing.team_id != team_id:
        raise InvalidCategoryError("category doesn't belong to the team", ctx)
    if existing.is_system:
        raise CannotDeleteSystemCategoryError(ctx)


def apply_system_category_policy(candidate: Category, existing: Category) -> None:
    """Reset caller-supplied fields that an update may not change.

    type always reverts to the stored type. For system categories name reverts
    to the stored name and delete_at is forced to 0.
    """
    candidate.type = existing.type
    if existing.is_system:
        candidate.name = existing.name
        candidate.delete_at = 0


def check_reserved_name(candidate: Category) -> None:
    """Only the system default category may carry DEFAULT_CATEGORY_NAME."""
    if not candidate.is_system and candidate.name.strip() == DEFAULT_CATEGORY_NAME:
        raise InvalidCategoryError(
            f"category name '{DEFAULT_CATEGORY_NAME}' is reserved",
            _scope(candidate.user_id, candidate.team_id, candidate.id or None),
        )


def check_permutation(
    new_order: list[str],
    existing_ids: Iterable[str],
    context: ErrorContext,
    missing_error: Callable[[str, ErrorContext], BoardsError] | None = None,
) -> None:
    """new_order must list every existing ID exactly once.

    Length is checked first, then duplicates, then membership. missing_error
    builds the error for an unknown ID (CategoryNotFoundError by default).
    """
    existing = set(existing_ids)
    if len(new_order) != len(existing):
        raise CategoriesLengthMismatchError(len(new_order), len(existing), context)

    seen: set[str] = set()
    for item_id in new_order:
        if item_id in seen:
            raise DuplicateCategoryIdError(item_id, context)
        seen.add(item_id)

    build = missing_error or CategoryNotFoundError
    for item_id in new_order:
        if item_id not in existing:
            raise build(item_id, context)
