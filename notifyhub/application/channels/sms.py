"""SMS delivery channel."""

from __future__ import annotations

import logging
from typing import Protocol

from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import SmsGatewayError
from notifyhub.infrastructure.database import TenantRepositoryRouter
from notifyhub.infrastructure.repositories import UserRepository

from .phone import DEFAULT_COUNTRY_CODE, normalize_phone_number

logger = logging.getLogger(__name__)

MAX_SMS_LENGTH = 1600
TRUNCATION_MARKER = "..."
# Twilio reports this code when the account's sending limit has been reached.
RATE_LIMIT_ERROR_CODE = 63038


class SmsGateway(Protocol):
    from_number: str

    def send(self, *, to: str, body: str) -> str | None: ...


def compose_sms_body(notification: Notification) -> str:
    """Return ``"<title>: <message>"`` cut to the SMS length limit."""

    body = f"{notification.title}: {notification.message}"
    if len(body) > MAX_SMS_LENGTH:
        return body[: MAX_SMS_LENGTH - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER
    return body


class SmsChannel:
    """Text notifications to the phone number on the user's profile."""

    name = "sms"

    def __init__(
        self,
        router: TenantRepositoryRouter,
        gateway: SmsGateway | None,
        *,
        default_country_code: str = DEFAULT_COUNTRY_CODE,
    ) -> None:
        self._router = router
        self._gateway = gateway
        self._default_country_code = default_country_code

    @property
    def is_active(self) -> bool:
        return self._gateway is not None

    def _resolve_phone_number(self, user_id: str, tenant_id: str | None) -> str | None:
        with self._router.session_scope(tenant_id) as session:
            contact = UserRepository(session).get_contact(user_id)

        if contact is None:
            logger.warning("User %s not found", user_id)
            return None
        if not contact.phone_number:
            logger.warning("No phone number found for user %s", user_id)
            return None

        normalized = normalize_phone_number(
            contact.phone_number, default_country_code=self._default_country_code
        )
        if normalized is None:
            logger.warning(
                "Invalid phone number format for user %s: %s", user_id, contact.phone_number
            )
        return normalized

    def send(self, user_id: str, notification: Notification, *, tenant_id: str | None = None) -> bool:
        """Text ``notification`` to ``user_id``.

        Gateway errors are logged and reported as ``False``; the rate limit
        code is logged as a warning, every other code as an error.
        """

        if self._gateway is None:
            logger.warning("SMS gateway not configured; skipping SMS for user %s", user_id)
            return False

        phone_number = self._resolve_phone_number(user_id, tenant_id)
        if phone_number is None:
            return False

        try:
            sid = self._gateway.send(to=phone_number, body=compose_sms_body(notification))
        except SmsGatewayError as exc:
            if exc.code == RATE_LIMIT_ERROR_CODE:
                logger.warning(
                    "SMS sending limit reached (%s): %s. SMS for user %s (%s) was not sent",
                    exc.code,
                    exc,
                    user_id,
                    phone_number,
                )
            else:
                logger.error(
                    "SMS gateway error (%s): %s - failed to send SMS to user %s (%s)",
                    exc.code,
                    exc,
                    user_id,
                    phone_number,
                )
            return False

        logger.info("SMS notification sent to %s for user %s (SID: %s)", phone_number, user_id, sid)
        return True


__all__ = [
    "MAX_SMS_LENGTH",
    "RATE_LIMIT_ERROR_CODE",
    "SmsChannel",
    "SmsGateway",
    "compose_sms_body",
]
