"""Use case for creating notifications."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.application.channels import DispatchScheduler, get_dispatch_scheduler
from notifyhub.domain.entities import Notification, NotificationPriority, NotificationType
from notifyhub.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def create_notification(
    session: Session,
    *,
    title: str,
    message: str,
    type: NotificationType = NotificationType.INFO,
    priority: NotificationPriority = NotificationPriority.NORMAL,
    entity_id: str | None = None,
    entity_type: str | None = None,
    metadata: dict[str, Any] | None = None,
    email_subject: str | None = None,
    html_content: str | None = None,
    tenant_id: str | None = None,
    scheduler: DispatchScheduler | None = None,
) -> Notification:
    """Persist a notification and queue its delivery.

    The record is always stored. Delivery runs in the background only when
    the notification has a recipient; its outcome never affects this call.
    """

    notification = Notification(
        id=None,
        title=title,
        message=message,
        type=NotificationType(type),
        priority=NotificationPriority(priority),
        entity_id=entity_id,
        entity_type=entity_type,
        metadata=metadata or {},
        is_read=False,
        email_subject=email_subject,
        html_content=html_content,
    )
    saved = NotificationRepository(session).create(notification)

    if not saved.entity_id:
        logger.info("Notification %s has no recipient; delivery skipped", saved.id)
        return saved

    try:
        (scheduler or get_dispatch_scheduler()).schedule(saved, tenant_id=tenant_id)
    except Exception:
        logger.exception("Failed to schedule delivery of notification %s", saved.id)

    return saved
