"""Use cases for storing notifications and managing their read state."""

from .create_notification import create_notification
from .delete_notification import delete_notification, delete_recipient_notifications
from .get_notification import get_notification
from .list_notifications import (
    count_unread,
    list_notifications,
    list_recipient_notifications,
    list_unread_notifications,
)
from .mark_as_read import (
    NOTIFICATION_READ_EVENT,
    acknowledge_notifications,
    mark_all_as_read,
    mark_as_read,
)

__all__ = [
    "NOTIFICATION_READ_EVENT",
    "acknowledge_notifications",
    "count_unread",
    "create_notification",
    "delete_notification",
    "delete_recipient_notifications",
    "get_notification",
    "list_notifications",
    "list_recipient_notifications",
    "list_unread_notifications",
    "mark_all_as_read",
    "mark_as_read",
]
