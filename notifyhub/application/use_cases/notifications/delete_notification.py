"""Use cases for deleting notifications."""

from sqlalchemy.orm import Session

from notifyhub.domain.exceptions import NotificationNotFoundError
from notifyhub.infrastructure.repositories import NotificationRepository


def delete_notification(session: Session, notification_id: str) -> None:
    if not NotificationRepository(session).delete(notification_id):
        raise NotificationNotFoundError(notification_id)


def delete_recipient_notifications(session: Session, entity_id: str) -> int:
    """Delete every notification addressed to ``entity_id``."""

    return NotificationRepository(session).delete_for_entity(entity_id)
