"""WebSocket handler streaming game state and accepting manual input."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_autopilot.grid import Direction
from snake_autopilot.server.game_manager import GameManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {d.name.lower(): d for d in Direction}


def _get_manager(ws: WebSocket) -> GameManager:
    return ws.app.state.game_manager


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Receive game state each tick; optionally steer or toggle autopilot.

    Client messages are JSON objects such as ``{"direction": "up"}`` or
    ``{"autopilot": false}``. Malformed messages are ignored.
    """
    manager = _get_manager(websocket)
    game = manager.get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    game.connections.append(websocket)
    logger.info("Client connected to game %s.", game_id)

    try:
        # Initial snapshot so the client gets immediate feedback.
        await websocket.send_text(
            json.dumps(game.snapshot(), separators=(",", ":")),
        )

        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            async with game.lock:
                enabled = msg.get("autopilot")
                if isinstance(enabled, bool):
                    manager.set_autopilot(game_id, enabled)

                direction_str = msg.get("direction")
                if isinstance(direction_str, str):
                    direction = _DIRECTION_MAP.get(direction_str.lower())
                    if direction is not None and not game.engine.autopilot:
                        game.engine.set_direction(direction)
    except WebSocketDisconnect:
        logger.info("Client disconnected from game %s.", game_id)
    finally:
        if websocket in game.connections:
            game.connections.remove(websocket)
