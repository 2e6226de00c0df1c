"""Twilio gateway used by the SMS delivery channel."""

from __future__ import annotations

import logging

from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client as TwilioClient

from notifyhub.config import Settings
from notifyhub.domain.exceptions import SmsGatewayError

logger = logging.getLogger(__name__)


class TwilioSmsGateway:
    """Send SMS messages through the Twilio REST API."""

    def __init__(self, client: TwilioClient, from_number: str) -> None:
        self._client = client
        self.from_number = from_number

    @classmethod
    def from_settings(cls, settings: Settings) -> "TwilioSmsGateway | None":
        """Return a gateway when Twilio is fully configured, ``None`` otherwise."""

        if not (settings.twilio_account_sid and settings.twilio_auth_token):
            logger.warning(
                "Twilio credentials not configured; SMS notifications are disabled"
            )
            return None
        if not settings.twilio_phone_number:
            logger.warning(
                "Twilio sender number not configured; SMS notifications are disabled"
            )
            return None

        try:
            client = TwilioClient(
                settings.twilio_account_sid,
                settings.twilio_auth_token,
                http_client=TwilioHttpClient(timeout=settings.channel_timeout_seconds),
            )
        except TwilioException as exc:
            logger.error("Failed to initialize Twilio client: %s", exc)
            return None

        logger.info("Twilio client initialized for SMS notifications")
        return cls(client, settings.twilio_phone_number)

    def send(self, *, to: str, body: str) -> str | None:
        """Send ``body`` to ``to`` and return the message SID."""

        try:
            message = self._client.messages.create(body=body, from_=self.from_number, to=to)
        except TwilioRestException as exc:
            raise SmsGatewayError(exc.msg or str(exc), code=exc.code) from exc
        except TwilioException as exc:
            raise SmsGatewayError(str(exc)) from exc
        return getattr(message, "sid", None)


__all__ = ["TwilioSmsGateway"]
