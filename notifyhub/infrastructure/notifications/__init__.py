"""Realtime notification helpers for the infrastructure layer."""

from .manager import RoomConnectionManager, notification_manager, user_room
from .publisher import (
    RealtimeEventPublisher,
    notification_publisher,
    serialize_notification,
)

__all__ = [
    "RoomConnectionManager",
    "notification_manager",
    "user_room",
    "RealtimeEventPublisher",
    "notification_publisher",
    "serialize_notification",
]
