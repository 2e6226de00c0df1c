"""Fan a notification out to every channel the recipient enabled."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Callable, NamedTuple

from notifyhub.domain.entities import Notification, NotificationPreferences

from .email import EmailChannel
from .in_app import InAppChannel
from .preferences import PreferenceResolver
from .push import PushChannel
from .sms import SmsChannel

logger = logging.getLogger(__name__)

ChannelSend = Callable[..., bool]


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one dispatch, one flag per channel."""

    in_app: bool = False
    email: bool = False
    sms: bool = False
    push: bool = False

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


class ChannelEntry(NamedTuple):
    name: str
    enabled: bool
    send: ChannelSend


class ChannelDispatcher:
    """Deliver notifications through in-app, email, SMS and push channels.

    Each channel runs inside its own failure boundary: an exception from one
    channel is logged and recorded as ``False`` for that channel only.
    """

    def __init__(
        self,
        preferences: PreferenceResolver,
        *,
        in_app: InAppChannel,
        email: EmailChannel,
        sms: SmsChannel,
        push: PushChannel,
    ) -> None:
        self._preferences = preferences
        self.in_app = in_app
        self.email = email
        self.sms = sms
        self.push = push

    def _channels(self, preferences: NotificationPreferences) -> list[ChannelEntry]:
        return [
            ChannelEntry("in_app", preferences.in_app_enabled, self.in_app.send),
            ChannelEntry("email", preferences.email_enabled, self.email.send),
            ChannelEntry("sms", preferences.sms_enabled, self.sms.send),
            ChannelEntry("push", preferences.push_enabled, self.push.send),
        ]

    def dispatch(self, notification: Notification, *, tenant_id: str | None = None) -> DispatchResult:
        """Send ``notification`` through the recipient's enabled channels.

        Never raises; the result reports which channels delivered.
        """

        entity_id = notification.entity_id
        if not entity_id:
            logger.warning("Notification %s has no entity_id, skipping send", notification.id)
            return DispatchResult()

        preferences = self._preferences.resolve(entity_id, tenant_id=tenant_id)
        results: dict[str, bool] = {}
        for entry in self._channels(preferences):
            if not entry.enabled:
                results[entry.name] = False
                continue
            try:
                results[entry.name] = bool(entry.send(entity_id, notification, tenant_id=tenant_id))
            except Exception:
                logger.exception(
                    "Failed to send %s notification %s to user %s",
                    entry.name,
                    notification.id,
                    entity_id,
                )
                results[entry.name] = False

        return DispatchResult(**results)


__all__ = ["ChannelDispatcher", "ChannelEntry", "DispatchResult"]
