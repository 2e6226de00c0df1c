"""Pydantic models describing push subscription payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PushSubscriptionKeysPayload(BaseModel):
    """Key pair generated by the browser for the subscription."""

    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class PushSubscriptionCreate(BaseModel):
    """Subscription object produced by ``PushManager.subscribe()``."""

    endpoint: str = Field(..., min_length=1, max_length=2048)
    keys: PushSubscriptionKeysPayload
    user_agent: str | None = Field(default=None, max_length=512)
    device_id: str | None = Field(default=None, max_length=255)


class PushSubscriptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    endpoint: str
    keys: PushSubscriptionKeysPayload
    user_agent: str | None = None
    device_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PushSubscriptionResponse(BaseModel):
    message: str
    subscription: PushSubscriptionRead


class PushSubscriptionList(BaseModel):
    subscriptions: list[PushSubscriptionRead]
    count: int


class PushUnsubscribeResponse(BaseModel):
    message: str
    removed: bool


class PushPublicKeyRead(BaseModel):
    """VAPID public key browsers need to subscribe; ``None`` when push is off."""

    public_key: str | None = None


__all__ = [
    "PushPublicKeyRead",
    "PushSubscriptionCreate",
    "PushSubscriptionKeysPayload",
    "PushSubscriptionList",
    "PushSubscriptionRead",
    "PushSubscriptionResponse",
    "PushUnsubscribeResponse",
]
