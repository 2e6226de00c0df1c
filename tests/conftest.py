"""Shared fixtures: isolated SQLite databases and fresh caches per test."""

from __future__ import annotations

import pytest

from notifyhub.application.channels import reset_dispatch_scheduler
from notifyhub.config import reset_settings_cache
from notifyhub.infrastructure.database import get_tenant_router, reset_tenant_router

from support import FakePublisher

_GATEWAY_VARIABLES = (
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
    "VAPID_PUBLIC_KEY",
    "VAPID_PRIVATE_KEY",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'default.db'}")
    monkeypatch.setenv(
        "TENANT_DATABASE_URL_TEMPLATE", f"sqlite:///{tmp_path}/tenant_{{tenant_id}}.db"
    )
    for name in _GATEWAY_VARIABLES:
        monkeypatch.delenv(name, raising=False)

    reset_settings_cache()
    reset_tenant_router()
    reset_dispatch_scheduler()
    yield
    reset_dispatch_scheduler()
    reset_tenant_router()
    reset_settings_cache()


@pytest.fixture
def router():
    return get_tenant_router()


@pytest.fixture
def session(router):
    db = router.get_session(None)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()
