"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .push_subscription_repository import PushSubscriptionRepository
from .settings_repository import SettingsRepository
from .user_repository import UserRepository

__all__ = [
    "NotificationRepository",
    "PushSubscriptionRepository",
    "SettingsRepository",
    "UserRepository",
]
