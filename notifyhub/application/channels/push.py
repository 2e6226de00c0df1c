"""Browser push delivery channel."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from notifyhub.application.use_cases.push_subscriptions import (
    delete_subscription,
    get_user_subscriptions,
)
from notifyhub.domain.entities import Notification, PushSubscription
from notifyhub.domain.exceptions import PushEndpointGoneError
from notifyhub.infrastructure.database import TenantRepositoryRouter

logger = logging.getLogger(__name__)


class PushGateway(Protocol):
    public_key: str

    def send(self, subscription: PushSubscription, payload: dict[str, Any]) -> None: ...


@dataclass(frozen=True)
class PushDeliveryResult:
    """Counts of a fan-out to every endpoint of one user.

    ``removed`` counts endpoints the push service reported as gone; those are
    deleted and not counted as ``failed``.
    """

    sent: int = 0
    failed: int = 0
    removed: int = 0


class _Outcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    REMOVED = "removed"


class PushChannel:
    """Send signed push messages to every device a user registered."""

    name = "push"

    def __init__(
        self,
        router: TenantRepositoryRouter,
        gateway: PushGateway | None,
        *,
        icon: str = "/favicon.ico",
        max_workers: int = 8,
    ) -> None:
        self._router = router
        self._gateway = gateway
        self._icon = icon
        self._max_workers = max_workers

    @property
    def is_active(self) -> bool:
        return self._gateway is not None

    @property
    def public_key(self) -> str | None:
        return self._gateway.public_key if self._gateway is not None else None

    def build_payload(self, notification: Notification) -> dict[str, Any]:
        return {
            "title": notification.title,
            "message": notification.message,
            "icon": self._icon,
            "badge": self._icon,
            "data": {
                "id": notification.id,
                "type": getattr(notification.type, "value", notification.type),
                "priority": getattr(notification.priority, "value", notification.priority),
                "metadata": notification.metadata or {},
                "url": f"/notifications/{notification.id}",
            },
        }

    def send_push_notification(
        self, user_id: str, notification: Notification, *, tenant_id: str | None = None
    ) -> PushDeliveryResult:
        """Deliver ``notification`` to all of ``user_id``'s endpoints concurrently."""

        if self._gateway is None:
            return PushDeliveryResult()

        with self._router.session_scope(tenant_id) as session:
            subscriptions = get_user_subscriptions(session, user_id)

        if not subscriptions:
            logger.info("No push subscriptions found for user %s", user_id)
            return PushDeliveryResult()

        payload = self.build_payload(notification)
        outcomes: list[_Outcome] = []
        workers = min(self._max_workers, len(subscriptions))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="push") as executor:
            futures = {
                executor.submit(self._send_to_subscription, subscription, payload, tenant_id): subscription
                for subscription in subscriptions
            }
            for future in as_completed(futures):
                try:
                    outcomes.append(future.result())
                except Exception:
                    logger.exception(
                        "Unexpected error sending push to subscription %s", futures[future].id
                    )
                    outcomes.append(_Outcome.FAILED)

        result = PushDeliveryResult(
            sent=outcomes.count(_Outcome.SENT),
            failed=outcomes.count(_Outcome.FAILED),
            removed=outcomes.count(_Outcome.REMOVED),
        )
        logger.info(
            "Push notifications: %s sent, %s failed, %s removed for user %s",
            result.sent,
            result.failed,
            result.removed,
            user_id,
        )
        return result

    def send(self, user_id: str, notification: Notification, *, tenant_id: str | None = None) -> bool:
        return self.send_push_notification(user_id, notification, tenant_id=tenant_id).sent > 0

    def _send_to_subscription(
        self,
        subscription: PushSubscription,
        payload: dict[str, Any],
        tenant_id: str | None,
    ) -> _Outcome:
        try:
            self._gateway.send(subscription, payload)
        except PushEndpointGoneError:
            logger.warning("Subscription %s is no longer valid, removing it", subscription.id)
            return self._prune(subscription, tenant_id)
        except Exception as exc:
            logger.error(
                "Failed to send push notification to subscription %s: %s", subscription.id, exc
            )
            return _Outcome.FAILED
        logger.debug("Push notification sent to subscription %s", subscription.id)
        return _Outcome.SENT

    def _prune(self, subscription: PushSubscription, tenant_id: str | None) -> _Outcome:
        try:
            with self._router.session_scope(tenant_id) as session:
                delete_subscription(session, subscription.id)
        except Exception:
            logger.exception("Failed to remove stale push subscription %s", subscription.id)
            return _Outcome.FAILED
        return _Outcome.REMOVED


__all__ = ["PushChannel", "PushDeliveryResult", "PushGateway"]
