"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .push_subscription import PushSubscriptionModel
from .user import ProfileModel, UserModel
from .user_setting import UserSettingModel

__all__ = [
    "NotificationModel",
    "ProfileModel",
    "PushSubscriptionModel",
    "UserModel",
    "UserSettingModel",
]
