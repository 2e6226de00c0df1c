"""Tests for tenant-scoped database selection."""

import pytest

from notifyhub.application.use_cases.notifications import count_unread, create_notification
from notifyhub.config import Settings
from notifyhub.infrastructure.database import TenantRepositoryRouter, validate_tenant_id

from support import FakeScheduler


def test_each_tenant_reads_only_its_own_notifications(router):
    with router.session_scope("acme") as session:
        create_notification(
            session, title="Acme only", message="Hi", entity_id="user-1", scheduler=FakeScheduler()
        )

    with router.session_scope("acme") as session:
        assert count_unread(session, "user-1") == 1
    with router.session_scope("globex") as session:
        assert count_unread(session, "user-1") == 0
    with router.session_scope(None) as session:
        assert count_unread(session, "user-1") == 0


def test_tenant_urls_come_from_the_template(tmp_path):
    settings = Settings(
        _env_file=None,
        secret_key="secret",
        tenant_database_url_template=f"sqlite:///{tmp_path}/{{tenant_id}}.db",
    )
    router = TenantRepositoryRouter(settings)

    assert router.resolve_url("acme") == f"sqlite:///{tmp_path}/acme.db"
    assert router.resolve_url(None) == settings.database_url


def test_tenants_require_a_template():
    router = TenantRepositoryRouter(
        Settings(_env_file=None, secret_key="secret", tenant_database_url_template=None)
    )

    with pytest.raises(ValueError):
        router.resolve_url("acme")


@pytest.mark.parametrize("tenant_id", ["../etc", "acme;drop", "", "-acme", "a" * 64])
def test_unsafe_tenant_identifiers_are_rejected(router, tenant_id):
    with pytest.raises(ValueError):
        validate_tenant_id(tenant_id)
    with pytest.raises(ValueError):
        router.get_session(tenant_id)
