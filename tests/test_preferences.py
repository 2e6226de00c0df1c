"""Tests for notification preference resolution."""

from contextlib import contextmanager
import logging

import pytest

from notifyhub.application.channels import PreferenceResolver
from notifyhub.domain.entities import NotificationPreferences

from support import set_preferences


class _BrokenRouter:
    @contextmanager
    def session_scope(self, tenant_id):
        raise RuntimeError("database unavailable")
        yield  # pragma: no cover


def test_defaults_apply_when_user_has_no_settings(router):
    preferences = PreferenceResolver(router).resolve("user-1")

    assert preferences == NotificationPreferences(
        email_enabled=True, sms_enabled=False, push_enabled=False, in_app_enabled=True
    )


def test_stored_toggles_override_defaults(router, session):
    set_preferences(session, "user-1", emailEnabled=False, smsEnabled=True, pushEnabled="true")

    preferences = PreferenceResolver(router).resolve("user-1")

    assert preferences.email_enabled is False
    assert preferences.sms_enabled is True
    assert preferences.push_enabled is True
    assert preferences.in_app_enabled is True


def test_settings_of_other_users_are_ignored(router, session):
    set_preferences(session, "user-2", smsEnabled=True)

    assert PreferenceResolver(router).resolve("user-1").sms_enabled is False


def test_lookup_failure_falls_back_to_in_app_only(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.WARNING)

    preferences = PreferenceResolver(_BrokenRouter()).resolve("user-1")

    assert preferences == NotificationPreferences.restrictive()
    assert preferences.in_app_enabled is True
    assert not (preferences.email_enabled or preferences.sms_enabled or preferences.push_enabled)
    assert "Failed to get notification preferences for user user-1" in caplog.text
