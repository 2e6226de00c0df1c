"""Test doubles and data builders shared by the test modules."""

from __future__ import annotations

import threading
import time
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Notification, PushSubscription
from notifyhub.domain.exceptions import PushDeliveryError, PushEndpointGoneError
from notifyhub.infrastructure.models import ProfileModel, UserModel
from notifyhub.infrastructure.repositories import SettingsRepository


class FakePublisher:
    """Record realtime events instead of sending them."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, Any]] = []

    def emit_to_room(self, room: str, event: str, payload: Any) -> None:
        self.events.append((room, event, payload))


class FakeEmailGateway:
    sender = "noreply@example.com"

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[dict[str, str]] = []

    def send(self, *, to: str, subject: str, html: str, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})


class FakeSmsGateway:
    from_number = "+15550000000"

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[dict[str, str]] = []

    def send(self, *, to: str, body: str) -> str | None:
        if self.error is not None:
            raise self.error
        self.sent.append({"to": to, "body": body})
        return f"SM{len(self.sent):04d}"


class FakePushGateway:
    """Push gateway whose behaviour is configured per endpoint.

    ``gone`` endpoints answer like a 410 response and ``failing`` ones like
    any other push service error. Endpoints listed in ``delays`` sleep for
    the given number of seconds before answering.
    """

    public_key = "test-public-key"

    def __init__(
        self,
        *,
        gone: set[str] | None = None,
        failing: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.gone = gone or set()
        self.failing = failing or set()
        self.delays = delays or {}
        self.attempted: list[str] = []
        self.delivered: list[tuple[str, dict[str, Any]]] = []
        self._lock = threading.Lock()

    def send(self, subscription: PushSubscription, payload: dict[str, Any]) -> None:
        with self._lock:
            self.attempted.append(subscription.endpoint)
        delay = self.delays.get(subscription.endpoint)
        if delay:
            time.sleep(delay)
        if subscription.endpoint in self.gone:
            raise PushEndpointGoneError("Gone", status_code=410)
        if subscription.endpoint in self.failing:
            raise PushDeliveryError("Server error", status_code=500)
        with self._lock:
            self.delivered.append((subscription.endpoint, payload))


class FakeScheduler:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.scheduled: list[tuple[Notification, str | None]] = []

    def schedule(self, notification: Notification, *, tenant_id: str | None = None) -> None:
        if self.error is not None:
            raise self.error
        self.scheduled.append((notification, tenant_id))


def add_user(
    session: Session,
    user_id: str,
    *,
    email: str | None = None,
    phone_number: str | None = None,
) -> None:
    user = UserModel(id=user_id, email=email, first_name="Test", last_name="User")
    session.add(user)
    if phone_number is not None:
        session.add(ProfileModel(id=f"profile-{user_id}", user_id=user_id, phone_number=phone_number))
    session.commit()


def set_preferences(session: Session, user_id: str, **flags: bool) -> None:
    """Store ``notifications.<flag>`` settings for ``user_id``."""

    repository = SettingsRepository(session)
    for key, value in flags.items():
        repository.set_value(user_id, f"notifications.{key}", value)
