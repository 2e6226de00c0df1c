"""Resolution of per-user notification channel preferences."""

from __future__ import annotations

import logging
from typing import Any

from notifyhub.domain.entities import NotificationPreferences
from notifyhub.infrastructure.database import TenantRepositoryRouter
from notifyhub.infrastructure.repositories import SettingsRepository

logger = logging.getLogger(__name__)

SETTINGS_PREFIX = "notifications"


def _flag(values: dict[str, Any], key: str, default: bool) -> bool:
    value = values.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"true", "false"}:
        return value.lower() == "true"
    return default


class PreferenceResolver:
    """Read channel toggles from the user's settings aggregate."""

    def __init__(self, router: TenantRepositoryRouter) -> None:
        self._router = router

    def resolve(self, entity_id: str, *, tenant_id: str | None = None) -> NotificationPreferences:
        """Return ``entity_id``'s preferences.

        Missing toggles take their defaults. When the settings cannot be read
        at all, the restrictive set is returned so only in-app delivery runs.
        """

        try:
            with self._router.session_scope(tenant_id) as session:
                values = SettingsRepository(session).get_settings(
                    entity_id, prefix=SETTINGS_PREFIX
                )
        except Exception:
            logger.warning(
                "Failed to get notification preferences for user %s, using defaults",
                entity_id,
                exc_info=True,
            )
            return NotificationPreferences.restrictive()

        defaults = NotificationPreferences()
        return NotificationPreferences(
            email_enabled=_flag(values, "emailEnabled", defaults.email_enabled),
            sms_enabled=_flag(values, "smsEnabled", defaults.sms_enabled),
            push_enabled=_flag(values, "pushEnabled", defaults.push_enabled),
            in_app_enabled=_flag(values, "inAppEnabled", defaults.in_app_enabled),
        )


__all__ = ["PreferenceResolver", "SETTINGS_PREFIX"]
