"""Utility helpers to push realtime events to websocket rooms."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from anyio import from_thread

from notifyhub.domain.entities import Notification
from notifyhub.utils import isoformat_or_none

from .manager import RoomConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class RealtimeEventPublisher:
    """Schedule structured events for delivery to a room.

    Publishing is fire-and-forget: there is no acknowledgment, retry or
    offline queue. Events for rooms without connected clients are dropped.
    """

    def __init__(self, manager: RoomConnectionManager) -> None:
        self._manager = manager

    def emit_to_room(self, room: str, event: str, payload: Any) -> None:
        """Schedule ``event`` with ``payload`` for every client in ``room``."""

        message = {"type": event, "data": _normalize_value(payload)}
        self._schedule_send(room, message)

    def _schedule_send(self, room: str, message: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            loop.create_task(self._manager.emit(room, message))
            return

        bound_loop = self._manager.loop
        if bound_loop is not None and bound_loop.is_running():
            asyncio.run_coroutine_threadsafe(self._manager.emit(room, message), bound_loop)
            return

        try:
            from_thread.run(self._manager.emit, room, message)
        except RuntimeError:
            logger.debug("No event loop available; dropping %s event for %s", message["type"], room)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the realtime payload representation for ``notification``."""

    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": _enum_value(notification.type),
        "priority": _enum_value(notification.priority),
        "isRead": notification.is_read,
        "metadata": _normalize_value(notification.metadata or {}),
        "createdAt": isoformat_or_none(notification.created_at),
        "updatedAt": isoformat_or_none(notification.updated_at),
    }


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _normalize_value(value: Any) -> Any:
    """Convert ``datetime`` instances nested inside ``value`` into ISO strings."""

    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _normalize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_value(item) for item in value]
    return value


notification_publisher = RealtimeEventPublisher(notification_manager)


__all__ = [
    "RealtimeEventPublisher",
    "notification_publisher",
    "serialize_notification",
]
