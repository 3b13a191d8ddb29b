"""User Category Scan — lazy, restartable paging over a user's categories in one team.

Invariants:
    - Pages of per_page rows are requested from the store in order (page 0, 1, ...)
    - Iteration ends on the first page shorter than per_page
    - A store error aborts iteration immediately and propagates
    - Each `async for` starts a fresh scan from page 0 (restartable)
    - Breaking out of the loop stops paging: no further store calls

Design Decisions:
    - Async iterator over callbacks: callers short-circuit with `break`
    - for_each_user_category kept as the visitor form (visitor returns True to stop)
"""

from collections.abc import AsyncIterator, Awaitable, Callable

from board_categories.core.category import CategoryBoards
from board_categories.core.domain_types import CATEGORY_PAGE_SIZE
from board_categories.core.repository_protocols import CategoryStore


class UserCategoryScan:
    """Async iterable of CategoryBoards for (user_id, team_id)."""

    def __init__(
        self,
        store: CategoryStore,
        user_id: str,
        team_id: str,
        per_page: int = CATEGORY_PAGE_SIZE,
    ):
        if per_page < 1:
            raise ValueError("per_page must be positive")
        self.store = store
        self.user_id = user_id
        self.team_id = team_id
        self.per_page = per_page

    def __aiter__(self) -> AsyncIterator[CategoryBoards]:
        return self._pages()

    async def _pages(self) -> AsyncIterator[CategoryBoards]:
        page = 0
        while True:
            categories = await self.store.get_user_categories(
                self.user_id, self.team_id, page, self.per_page,
            )
            for category in categories:
                yield category
            if len(categories) < self.per_page:
                return
            page += 1

    async def collect(self) -> list[CategoryBoards]:
        return [category async for category in self]


async def for_each_user_category(
    store: CategoryStore,
    user_id: str,
    team_id: str,
    visitor: Callable[[CategoryBoards], Awaitable[bool] | bool],
    per_page: int = CATEGORY_PAGE_SIZE,
) -> None:
    """Call visitor for each category until it returns True or categories run out."""
    async for category in UserCategoryScan(store, user_id, team_id, per_page):
        done = visitor(category)
        if isinstance(done, Awaitable):
            done = await done
        if done:
            return
