from .notification import (
    NotificationBulkResult,
    NotificationCountRead,
    NotificationPageRead,
    NotificationRead,
)
from .push_subscription import (
    PushPublicKeyRead,
    PushSubscriptionCreate,
    PushSubscriptionKeysPayload,
    PushSubscriptionList,
    PushSubscriptionRead,
    PushSubscriptionResponse,
    PushUnsubscribeResponse,
)

__all__ = [
    "NotificationBulkResult",
    "NotificationCountRead",
    "NotificationPageRead",
    "NotificationRead",
    "PushPublicKeyRead",
    "PushSubscriptionCreate",
    "PushSubscriptionKeysPayload",
    "PushSubscriptionList",
    "PushSubscriptionRead",
    "PushSubscriptionResponse",
    "PushUnsubscribeResponse",
]
