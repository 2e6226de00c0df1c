"""Tests for websocket rooms and the realtime event publisher."""

import asyncio
import threading

from notifyhub.domain.entities import Notification, NotificationType
from notifyhub.infrastructure.notifications import (
    RealtimeEventPublisher,
    RoomConnectionManager,
    serialize_notification,
    user_room,
)


class _FakeWebSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.broken = broken
        self.accepted = False
        self.messages = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message) -> None:
        if self.broken:
            raise RuntimeError("connection closed")
        self.messages.append(message)


def test_emit_reaches_every_socket_in_the_room_and_drops_broken_ones():
    manager = RoomConnectionManager()
    healthy, broken, other = _FakeWebSocket(), _FakeWebSocket(broken=True), _FakeWebSocket()

    async def scenario():
        await manager.join("user_1", healthy)
        await manager.join("user_1", broken)
        await manager.join("user_2", other)
        return await manager.emit("user_1", {"type": "notification", "data": {"id": "n-1"}})

    delivered = asyncio.run(scenario())

    assert delivered == 1
    assert healthy.accepted is True
    assert healthy.messages == [{"type": "notification", "data": {"id": "n-1"}}]
    assert other.messages == []
    assert manager.connection_count("user_1") == 1


def test_publisher_delivers_from_worker_threads_through_the_bound_loop():
    manager = RoomConnectionManager()
    publisher = RealtimeEventPublisher(manager)
    websocket = _FakeWebSocket()

    async def scenario():
        await manager.join(user_room("42"), websocket)
        worker = threading.Thread(
            target=publisher.emit_to_room, args=(user_room("42"), "notificationRead", "n-1")
        )
        worker.start()
        await asyncio.get_running_loop().run_in_executor(None, worker.join)
        for _ in range(50):
            if websocket.messages:
                break
            await asyncio.sleep(0.01)

    asyncio.run(scenario())

    assert websocket.messages == [{"type": "notificationRead", "data": "n-1"}]


def test_events_without_a_loop_are_dropped():
    manager = RoomConnectionManager()

    RealtimeEventPublisher(manager).emit_to_room(user_room("42"), "notification", {"id": "n-1"})

    assert manager.connection_count(user_room("42")) == 0


def test_serialized_notification_uses_client_field_names():
    notification = Notification(
        id="n-1",
        title="Hi",
        message="There",
        type=NotificationType.WARNING,
        metadata={"orderId": 7},
    )

    payload = serialize_notification(notification)

    assert payload == {
        "id": "n-1",
        "title": "Hi",
        "message": "There",
        "type": "warning",
        "priority": "normal",
        "isRead": False,
        "metadata": {"orderId": 7},
        "createdAt": None,
        "updatedAt": None,
    }
