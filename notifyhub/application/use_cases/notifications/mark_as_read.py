"""Use cases for updating the read state of notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import NotificationNotFoundError
from notifyhub.infrastructure.notifications import (
    RealtimeEventPublisher,
    notification_publisher,
    user_room,
)
from notifyhub.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

NOTIFICATION_READ_EVENT = "notificationRead"


def mark_as_read(
    session: Session,
    notification_id: str,
    *,
    publisher: RealtimeEventPublisher = notification_publisher,
) -> Notification:
    """Mark one notification as read and tell the recipient's open clients."""

    notification = NotificationRepository(session).mark_as_read(notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)

    if notification.entity_id:
        try:
            publisher.emit_to_room(
                user_room(notification.entity_id), NOTIFICATION_READ_EVENT, notification.id
            )
        except Exception as exc:
            logger.warning("Failed to emit %s event: %s", NOTIFICATION_READ_EVENT, exc)
    return notification


def mark_all_as_read(
    session: Session,
    entity_id: str,
    *,
    publisher: RealtimeEventPublisher = notification_publisher,
) -> int:
    """Mark every unread notification of ``entity_id`` as read.

    One read event is emitted per notification that changed state.
    """

    updated_ids = NotificationRepository(session).mark_all_as_read(entity_id)
    _emit_read_events(publisher, entity_id, updated_ids)
    return len(updated_ids)


def acknowledge_notifications(
    session: Session,
    entity_id: str,
    notification_ids: Sequence[str],
    *,
    publisher: RealtimeEventPublisher = notification_publisher,
) -> int:
    """Mark the listed notifications of ``entity_id`` as read.

    Ids that belong to another recipient, do not exist or are already read
    are ignored. One read event is emitted per notification that changed.
    """

    updated_ids = NotificationRepository(session).mark_many_as_read(entity_id, notification_ids)
    _emit_read_events(publisher, entity_id, updated_ids)
    return len(updated_ids)


def _emit_read_events(
    publisher: RealtimeEventPublisher, entity_id: str, notification_ids: Sequence[str]
) -> None:
    room = user_room(entity_id)
    for notification_id in notification_ids:
        try:
            publisher.emit_to_room(room, NOTIFICATION_READ_EVENT, notification_id)
        except Exception as exc:
            logger.warning("Failed to emit %s event: %s", NOTIFICATION_READ_EVENT, exc)
