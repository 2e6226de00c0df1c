"""Domain entity representing a persisted notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from math import ceil
from typing import Any


class NotificationType(str, Enum):
    """Category of the event a notification describes."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationPriority(str, Enum):
    """Severity used by clients to rank notifications."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


@dataclass
class Notification:
    """Message addressed to a recipient and delivered through enabled channels.

    ``entity_id`` identifies the recipient. When it is ``None`` the record is
    still stored but nobody is notified.
    """

    id: str | None
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    priority: NotificationPriority = NotificationPriority.NORMAL
    entity_id: str | None = None
    entity_type: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    email_subject: str | None = None
    html_content: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class NotificationPage:
    """Slice of notifications returned by paginated listings."""

    items: list[Notification]
    total: int
    page: int
    limit: int

    @property
    def last_page(self) -> int:
        return max(1, ceil(self.total / self.limit)) if self.limit else 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.last_page

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


__all__ = [
    "Notification",
    "NotificationPage",
    "NotificationPriority",
    "NotificationType",
]
