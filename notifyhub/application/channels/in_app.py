"""In-app delivery through realtime websocket rooms."""

from __future__ import annotations

import logging

from notifyhub.domain.entities import Notification
from notifyhub.infrastructure.notifications import (
    RealtimeEventPublisher,
    serialize_notification,
    user_room,
)

logger = logging.getLogger(__name__)

NOTIFICATION_EVENT = "notification"


class InAppChannel:
    """Publish notifications to the recipient's realtime room.

    Delivery is best-effort: the event is handed to the publisher and
    forgotten. Clients that are offline miss it and reconcile against the
    persisted notifications when they reconnect.
    """

    name = "in_app"

    def __init__(self, publisher: RealtimeEventPublisher) -> None:
        self._publisher = publisher

    def emit(self, entity_id: str, notification: Notification) -> None:
        room = user_room(entity_id)
        self._publisher.emit_to_room(room, NOTIFICATION_EVENT, serialize_notification(notification))
        logger.info("In-app notification %s published to room %s", notification.id, room)

    def send(self, entity_id: str, notification: Notification, *, tenant_id: str | None = None) -> bool:
        self.emit(entity_id, notification)
        return True


__all__ = ["InAppChannel", "NOTIFICATION_EVENT"]
