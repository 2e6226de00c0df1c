"""Domain entities exposed by the application."""

from .notification import (
    Notification,
    NotificationPage,
    NotificationPriority,
    NotificationType,
)
from .preferences import NotificationPreferences
from .push_subscription import PushSubscription, PushSubscriptionKeys
from .user import UserContact

__all__ = [
    "Notification",
    "NotificationPage",
    "NotificationPriority",
    "NotificationType",
    "NotificationPreferences",
    "PushSubscription",
    "PushSubscriptionKeys",
    "UserContact",
]
