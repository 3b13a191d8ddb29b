"""API Dependencies — request-scoped wiring of store, notifier and services.

Invariants:
    - Services are built per request; they hold no state between requests
    - The caller's user ID comes from the X-User-ID header (authentication is upstream)
    - Tests override get_store / get_notifier through app.dependency_overrides
"""

from fastapi import Depends, Header, Request

from board_categories.core.repository_protocols import CategoryStore
from board_categories.infrastructure.category_store import SqlCategoryStore
from board_categories.infrastructure.database import get_db_manager
from board_categories.services.category_lifecycle import CategoryLifecycle
from board_categories.services.category_order import CategoryOrder
from board_categories.services.notifier import ChangeNotifier


def get_user_id(x_user_id: str = Header(min_length=1)) -> str:
    return x_user_id


def get_store() -> CategoryStore:
    return SqlCategoryStore(get_db_manager())


def get_notifier(request: Request) -> ChangeNotifier:
    return request.app.state.notifier


def get_lifecycle(
    store: CategoryStore = Depends(get_store),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> CategoryLifecycle:
    return CategoryLifecycle(store, notifier)


def get_order(
    store: CategoryStore = Depends(get_store),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> CategoryOrder:
    return CategoryOrder(store, notifier)
