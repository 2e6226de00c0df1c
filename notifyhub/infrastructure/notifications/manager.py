"""Room-based connection management for notification websockets."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def user_room(entity_id: str) -> str:
    """Return the name of the room that reaches every client of ``entity_id``."""

    return f"user_{entity_id}"


class RoomConnectionManager:
    """Manage active websocket connections grouped by room name.

    The registry lives in process memory. Clients connected to another
    instance of the service do not receive events published here.
    """

    def __init__(self) -> None:
        self._rooms: DefaultDict[str, Set[WebSocket]] = defaultdict(set)
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop | None:
        """Event loop that owns the registered websockets."""

        return self._loop

    def bind_loop(self, loop: asyncio.AbstractEventLoop | None) -> None:
        self._loop = loop

    async def join(self, room: str, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it in ``room``."""

        await websocket.accept()
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._rooms[room].add(websocket)

    def leave(self, room: str, websocket: WebSocket) -> None:
        """Remove ``websocket`` from ``room``."""

        connections = self._rooms.get(room)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._rooms.pop(room, None)

    def connection_count(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    async def emit(self, room: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every connection in ``room``.

        Returns the number of connections that received it. Messages for an
        empty room are dropped.
        """

        delivered = 0
        for connection in list(self._rooms.get(room, set())):
            try:
                await connection.send_json(message)
            except Exception:
                logger.debug("Dropping broken websocket from room %s", room, exc_info=True)
                self.leave(room, connection)
            else:
                delivered += 1
        return delivered


notification_manager = RoomConnectionManager()


__all__ = ["RoomConnectionManager", "notification_manager", "user_room"]
