"""Category Change Stream — websocket endpoint subscribing a client to its category changes.

Invariants:
    - A connection subscribes to exactly one (team_id, user_id) group
    - The socket is unsubscribed on disconnect, whatever the cause
    - Client text "ping" is answered with {"action": "PONG"}; other input is ignored
"""

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from board_categories.api.dependencies import get_user_id

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["websocket"])


@router.websocket("/ws")
async def category_changes(
    websocket: WebSocket,
    team_id: str,
    user_id: str = Depends(get_user_id),
):
    hub = websocket.app.state.websocket_hub
    await websocket.accept()
    hub.subscribe(websocket, team_id, user_id)
    try:
        while True:
            message = await websocket.receive_text()
            if message.strip().lower() == "ping":
                await websocket.send_json({"action": "PONG"})
    except WebSocketDisconnect:
        logger.info(
            "WebSocket disconnected",
            extra={"team_id": team_id, "user_id": user_id},
        )
    finally:
        hub.unsubscribe(websocket, team_id, user_id)
