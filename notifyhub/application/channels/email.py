"""Email delivery channel."""

from __future__ import annotations

import html
import logging
from typing import Protocol

from notifyhub.domain.entities import Notification
from notifyhub.infrastructure.database import TenantRepositoryRouter
from notifyhub.infrastructure.repositories import UserRepository
from notifyhub.utils import now_utc

logger = logging.getLogger(__name__)


class EmailGateway(Protocol):
    sender: str

    def send(self, *, to: str, subject: str, html: str, text: str) -> None: ...


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` so ``text`` can be embedded in HTML."""

    return html.escape(text, quote=True).replace("&#x27;", "&#039;")


def render_email_html(notification: Notification, *, app_name: str) -> str:
    """Return the HTML body for ``notification``.

    Pre-rendered ``html_content`` is used verbatim. Otherwise a minimal
    document is built from the escaped title and message.
    """

    if notification.html_content:
        return notification.html_content

    title = escape_html(notification.title)
    message = "<br>".join(escape_html(line) for line in notification.message.split("\n"))
    footer = f"&copy; {now_utc().year} {escape_html(app_name)}. All rights reserved."
    return (
        "<!DOCTYPE html>"
        "<html>"
        "<head>"
        '<meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        "</head>"
        '<body style="font-family: Arial, Helvetica, sans-serif; line-height: 1.6; '
        'color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">'
        '<div style="background-color: #f9fafb; border-radius: 8px; padding: 30px; '
        'border: 1px solid #e5e7eb;">'
        f'<h2 style="color: #111827; margin-bottom: 20px;">{title}</h2>'
        f'<div style="color: #374151; font-size: 16px; margin-bottom: 20px;">{message}</div>'
        '<hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;" />'
        f'<p style="font-size: 12px; color: #9ca3af; text-align: center; margin: 0;">{footer}</p>'
        "</div>"
        "</body>"
        "</html>"
    )


class EmailChannel:
    """Send notifications to the recipient's email address."""

    name = "email"

    def __init__(
        self,
        router: TenantRepositoryRouter,
        gateway: EmailGateway | None,
        *,
        app_name: str = "App",
    ) -> None:
        self._router = router
        self._gateway = gateway
        self._app_name = app_name

    @property
    def is_active(self) -> bool:
        return self._gateway is not None

    def send(self, entity_id: str, notification: Notification, *, tenant_id: str | None = None) -> bool:
        """Email ``notification`` to ``entity_id``.

        Returns ``False`` without raising when the channel is disabled or the
        user has no address. Gateway failures propagate to the caller.
        """

        if self._gateway is None:
            logger.warning("Email gateway not configured; skipping email for user %s", entity_id)
            return False

        with self._router.session_scope(tenant_id) as session:
            contact = UserRepository(session).get_contact(entity_id)

        if contact is None or not contact.email:
            logger.warning(
                "User %s not found or has no email, skipping email notification", entity_id
            )
            return False

        subject = notification.email_subject or notification.title
        self._gateway.send(
            to=contact.email,
            subject=subject,
            html=render_email_html(notification, app_name=self._app_name),
            text=notification.message,
        )
        logger.info("Email notification %s sent to %s", notification.id, contact.email)
        return True


__all__ = ["EmailChannel", "EmailGateway", "escape_html", "render_email_html"]
