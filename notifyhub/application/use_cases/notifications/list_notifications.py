"""Use cases for listing a recipient's notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from notifyhub.domain.entities import (
    Notification,
    NotificationPage,
    NotificationPriority,
    NotificationType,
)
from notifyhub.infrastructure.repositories import NotificationRepository

MAX_PAGE_SIZE = 100


def list_notifications(
    session: Session,
    *,
    entity_id: str,
    page: int = 1,
    limit: int = 10,
    is_read: bool | None = None,
    notification_type: NotificationType | None = None,
    priority: NotificationPriority | None = None,
) -> NotificationPage:
    """Return one page of ``entity_id``'s notifications, newest first."""

    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    items, total = NotificationRepository(session).list_for_entity(
        entity_id,
        offset=(page - 1) * limit,
        limit=limit,
        is_read=is_read,
        notification_type=notification_type,
        priority=priority,
    )
    return NotificationPage(items=list(items), total=total, page=page, limit=limit)


def list_recipient_notifications(
    session: Session, *, entity_id: str, entity_type: str | None = "user"
) -> list[Notification]:
    return list(
        NotificationRepository(session).list_for_recipient(entity_id, entity_type=entity_type)
    )


def list_unread_notifications(session: Session, entity_id: str) -> list[Notification]:
    return list(NotificationRepository(session).list_unread_for_entity(entity_id))


def count_unread(session: Session, entity_id: str) -> int:
    return NotificationRepository(session).count_unread(entity_id)
