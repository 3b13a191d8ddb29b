"""WebSocket Hub — Broadcaster implementation fanning out to subscribed websockets.

Invariants:
    - Subscribers are grouped by (team_id, user_id): category changes only reach
      the owning user's connections in that team
    - A socket whose send fails is dropped from its group; other sockets still receive
    - Messages are JSON objects with an `action` and `team_id`

Design Decisions:
    - In-process groups (single uvicorn worker); a shared channel layer is not needed
"""

import logging
from dataclasses import asdict

from fastapi import WebSocket

from board_categories.core.category import BoardCategoryChange, Category
from board_categories.core.domain_types import WebsocketAction

logger = logging.getLogger(__name__)


class WebSocketHub:
    """Tracks websocket subscribers and sends category change messages to them."""

    def __init__(self):
        self._groups: dict[tuple[str, str], set[WebSocket]] = {}

    def subscribe(self, websocket: WebSocket, team_id: str, user_id: str) -> None:
        self._groups.setdefault((team_id, user_id), set()).add(websocket)
        logger.info(
            "WebSocket subscribed",
            extra={"team_id": team_id, "user_id": user_id},
        )

    def unsubscribe(self, websocket: WebSocket, team_id: str, user_id: str) -> None:
        group = self._groups.get((team_id, user_id))
        if group is None:
            return
        group.discard(websocket)
        if not group:
            del self._groups[(team_id, user_id)]

    def subscriber_count(self, team_id: str, user_id: str) -> int:
        return len(self._groups.get((team_id, user_id), ()))

    async def _send(self, team_id: str, user_id: str, message: dict) -> None:
        for websocket in list(self._groups.get((team_id, user_id), ())):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(
                    f"Dropping websocket after failed send: {e}",
                    extra={"team_id": team_id, "user_id": user_id,
                           "action": message.get("action")},
                )
                self.unsubscribe(websocket, team_id, user_id)

    async def broadcast_category_change(self, category: Category) -> None:
        await self._send(category.team_id, category.user_id, {
            "action": WebsocketAction.UPDATE_CATEGORY.value,
            "team_id": category.team_id,
            "category": category.to_dict(),
        })

    async def broadcast_category_reorder(
        self, team_id: str, user_id: str, category_order: list[str],
    ) -> None:
        await self._send(team_id, user_id, {
            "action": WebsocketAction.REORDER_CATEGORIES.value,
            "team_id": team_id,
            "category_order": category_order,
        })

    async def broadcast_category_board_change(
        self, team_id: str, user_id: str, changes: list[BoardCategoryChange],
    ) -> None:
        await self._send(team_id, user_id, {
            "action": WebsocketAction.UPDATE_BOARD_CATEGORY.value,
            "team_id": team_id,
            "board_categories": [asdict(c) for c in changes],
        })

    async def broadcast_category_boards_reorder(
        self, team_id: str, user_id: str, category_id: str, board_order: list[str],
    ) -> None:
        await self._send(team_id, user_id, {
            "action": WebsocketAction.REORDER_CATEGORY_BOARDS.value,
            "team_id": team_id,
            "category_id": category_id,
            "board_order": board_order,
        })
