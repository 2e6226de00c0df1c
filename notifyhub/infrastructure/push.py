"""Web Push gateway signing messages with VAPID keys."""

from __future__ import annotations

import json
import logging
from typing import Any

from pywebpush import WebPushException, webpush

from notifyhub.config import Settings
from notifyhub.domain.entities import PushSubscription
from notifyhub.domain.exceptions import PushDeliveryError, PushEndpointGoneError

logger = logging.getLogger(__name__)

HTTP_GONE = 410


class WebPushGateway:
    """Deliver encrypted, VAPID-signed payloads to browser push services."""

    def __init__(
        self,
        *,
        public_key: str,
        private_key: str,
        contact: str,
        timeout: float | None = None,
    ) -> None:
        self.public_key = public_key
        self._private_key = private_key
        self._contact = contact
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "WebPushGateway | None":
        """Return a gateway when both VAPID keys are configured."""

        if not (settings.vapid_public_key and settings.vapid_private_key):
            logger.warning("VAPID keys not configured; push notifications are disabled")
            return None
        logger.info("VAPID keys initialized for push notifications")
        return cls(
            public_key=settings.vapid_public_key,
            private_key=settings.vapid_private_key,
            contact=settings.vapid_email,
            timeout=settings.channel_timeout_seconds,
        )

    def send(self, subscription: PushSubscription, payload: dict[str, Any]) -> None:
        """Send ``payload`` to one endpoint.

        Raises :class:`PushEndpointGoneError` when the push service answers
        410 Gone and :class:`PushDeliveryError` for every other failure.
        """

        try:
            webpush(
                subscription_info=subscription.as_subscription_info(),
                data=json.dumps(payload),
                vapid_private_key=self._private_key,
                # pywebpush adds ``aud`` and ``exp`` to the claims it is given.
                vapid_claims={"sub": self._contact},
                timeout=self._timeout,
            )
        except WebPushException as exc:
            response = getattr(exc, "response", None)
            status_code = getattr(response, "status_code", None)
            if status_code == HTTP_GONE:
                raise PushEndpointGoneError(str(exc), status_code=status_code) from exc
            raise PushDeliveryError(str(exc), status_code=status_code) from exc


__all__ = ["WebPushGateway"]
