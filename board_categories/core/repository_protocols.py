"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every store call is atomic on its own; no multi-call transaction is assumed
    - Broadcaster calls are best-effort; a failure never reaches the request

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO
"""

from typing import Protocol

from board_categories.core.category import (
    BoardCategoryChange, Category, CategoryBoards,
)


class CategoryStore(Protocol):
    """Contract for category persistence — implemented by infrastructure."""
    async def get_category(self, category_id: str) -> Category: ...
    async def create_category(self, category: Category) -> None: ...
    async def update_category(
        self, category: Category, expected_update_at: int | None = None,
    ) -> None: ...
    async def delete_category(
        self, category_id: str, user_id: str, team_id: str,
    ) -> None: ...
    async def get_user_categories(
        self, user_id: str, team_id: str, page: int, per_page: int,
    ) -> list[CategoryBoards]: ...
    async def reorder_categories(
        self, user_id: str, team_id: str, new_category_order: list[str],
    ) -> list[str]: ...
    async def add_update_user_category_board(
        self, team_id: str, user_id: str, category_id: str, board_ids: list[str],
    ) -> None: ...
    async def reorder_category_boards(
        self, category_id: str, new_board_order: list[str],
    ) -> list[str]: ...


class Broadcaster(Protocol):
    """Contract for change notifications — implemented by the websocket hub."""
    async def broadcast_category_change(self, category: Category) -> None: ...
    async def broadcast_category_reorder(
        self, team_id: str, user_id: str, category_order: list[str],
    ) -> None: ...
    async def broadcast_category_board_change(
        self, team_id: str, user_id: str, changes: list[BoardCategoryChange],
    ) -> None: ...
    async def broadcast_category_boards_reorder(
        self, team_id: str, user_id: str, category_id: str, board_order: list[str],
    ) -> None: ...
