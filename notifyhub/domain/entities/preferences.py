"""Per-user notification channel preferences."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationPreferences:
    """Independent toggles for each delivery channel."""

    email_enabled: bool = True
    sms_enabled: bool = False
    push_enabled: bool = False
    in_app_enabled: bool = True

    @classmethod
    def restrictive(cls) -> "NotificationPreferences":
        """Preferences used when the user's settings cannot be read."""

        return cls(
            email_enabled=False,
            sms_enabled=False,
            push_enabled=False,
            in_app_enabled=True,
        )


__all__ = ["NotificationPreferences"]
