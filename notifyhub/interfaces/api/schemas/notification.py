"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notifyhub.domain.entities import NotificationPriority, NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    type: NotificationType
    priority: NotificationPriority
    entity_id: str | None = None
    entity_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    email_subject: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationPageRead(BaseModel):
    """Paginated list of notifications."""

    data: list[NotificationRead]
    total: int
    page: int
    limit: int
    last_page: int
    has_next_page: bool
    has_prev_page: bool


class NotificationCountRead(BaseModel):
    count: int


class NotificationBulkResult(BaseModel):
    """Outcome of an operation touching several notifications."""

    count: int
    message: str


__all__ = [
    "NotificationBulkResult",
    "NotificationCountRead",
    "NotificationPageRead",
    "NotificationRead",
]
