"""SendGrid gateway used by the email delivery channel."""

from __future__ import annotations

import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notifyhub.config import Settings
from notifyhub.domain.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                field = item.get("field")
                if message and field:
                    messages.append(f"{message} (field: {field})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(status_code: Any, body: Any) -> str:
    details = _extract_sendgrid_error_details(body)
    if status_code and details:
        return f"SendGrid API request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid API request failed with status {status_code}"
    if details:
        return f"SendGrid API request failed: {details}"
    return "SendGrid API request failed"


class SendGridEmailGateway:
    """Send transactional email through the SendGrid REST API."""

    def __init__(self, api_key: str, sender: str, *, timeout: float | None = None) -> None:
        self.sender = sender
        self._api_key = api_key
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SendGridEmailGateway | None":
        """Return a gateway when SendGrid is configured, ``None`` otherwise."""

        if not (settings.sendgrid_api_key and settings.sendgrid_sender):
            logger.warning(
                "SendGrid configuration incomplete; email notifications are disabled"
            )
            return None
        return cls(
            settings.sendgrid_api_key,
            settings.sendgrid_sender,
            timeout=settings.channel_timeout_seconds,
        )

    def _client(self) -> SendGridAPIClient:
        client = SendGridAPIClient(self._api_key)
        if self._timeout is not None:
            client.client.timeout = self._timeout
        return client

    def send(self, *, to: str, subject: str, html: str, text: str) -> None:
        """Deliver one message, raising :class:`EmailDeliveryError` on failure."""

        message = Mail(
            from_email=self.sender,
            to_emails=to,
            subject=subject,
            html_content=html,
            plain_text_content=text,
        )

        try:
            response = self._client().send(message)
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            description = _describe_failure(status_code, getattr(exc, "body", None))
            logger.error(description)
            raise EmailDeliveryError(description, status_code=status_code) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            description = _describe_failure(status_code, getattr(response, "body", None))
            logger.error(description)
            raise EmailDeliveryError(description, status_code=status_code)


__all__ = ["SendGridEmailGateway"]
