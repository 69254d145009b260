"""
Real-time push channel.

Clients connect to ``/ws`` and receive JSON messages shaped as
``{"event": <name>, "data": <payload>}``. Two events exist:

- ``activeUsers``: number of open connections, sent on every connect and
  disconnect, including connections dropped after a failed send.
- ``leaderboardUpdated``: the full leaderboard, sent after an accepted
  submission and after an admin deletes a user or a problem.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

ACTIVE_USERS = "activeUsers"
LEADERBOARD_UPDATED = "leaderboardUpdated"

router = APIRouter(tags=["realtime"])


class ConnectionManager:
    def __init__(self) -> None:
        self.active_connections: List[WebSocket] = []

    @property
    def count(self) -> int:
        return len(self.active_connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"Client connected ({self.count} active)")
        await self.broadcast(ACTIVE_USERS, self.count)

    async def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        logger.info(f"Client disconnected ({self.count} active)")
        await self.broadcast(ACTIVE_USERS, self.count)

    async def broadcast(self, event: str, data: Any) -> None:
        dropped = await self._send_all({"event": event, "data": jsonable_encoder(data)})
        # every drop is a disconnect, so the survivors get a fresh count
        while dropped:
            dropped = await self._send_all({"event": ACTIVE_USERS, "data": self.count})

    async def _send_all(self, message: dict) -> int:
        dead = []
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                logger.warning(f"Dropping connection after failed send: {e}")
                dead.append(connection)
        for connection in dead:
            if connection in self.active_connections:
                self.active_connections.remove(connection)
        return len(dead)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    manager: ConnectionManager = websocket.app.state.connections
    await manager.connect(websocket)
    try:
        # inbound frames, text or binary, are ignored
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        await manager.disconnect(websocket)
