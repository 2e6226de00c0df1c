"""Domain entity describing a browser push subscription."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PushSubscriptionKeys:
    """Key pair issued by the browser for payload encryption."""

    p256dh: str
    auth: str

    def __post_init__(self) -> None:
        if not self.p256dh or not self.auth:
            raise ValueError("Push subscription keys require both p256dh and auth")

    def as_dict(self) -> dict[str, str]:
        return {"p256dh": self.p256dh, "auth": self.auth}


@dataclass
class PushSubscription:
    """One device endpoint registered by a user for push messages."""

    id: str | None
    user_id: str
    endpoint: str
    keys: PushSubscriptionKeys
    user_agent: str | None = None
    device_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def as_subscription_info(self) -> dict[str, object]:
        """Return the structure expected by Web Push libraries."""

        return {"endpoint": self.endpoint, "keys": self.keys.as_dict()}


__all__ = ["PushSubscription", "PushSubscriptionKeys"]
