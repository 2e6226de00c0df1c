"""Database configuration and tenant-scoped session management."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

import logging
import re
import threading

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from notifyhub.config import Settings, get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)

DEFAULT_TENANT_KEY = "default"
_TENANT_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,62}$")


def validate_tenant_id(tenant_id: str) -> str:
    """Return ``tenant_id`` when it is safe to embed in a database URL."""

    if not _TENANT_ID_PATTERN.match(tenant_id):
        raise ValueError(f"Invalid tenant identifier: {tenant_id!r}")
    return tenant_id


def _engine_options(url: str) -> dict[str, object]:
    if url.startswith("sqlite"):
        # Sessions are opened from dispatch worker threads as well as requests.
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


class TenantRepositoryRouter:
    """Hand out sessions bound to exactly one tenant's isolated database.

    Engines are created lazily and cached per tenant key. Sessions are never
    cached: every call to :meth:`session_scope` opens a new one for the tenant
    it was asked for, so a handle obtained for tenant A cannot leak into a
    request for tenant B.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engines: dict[str, Engine] = {}
        self._session_factories: dict[str, sessionmaker[Session]] = {}
        self._lock = threading.Lock()

    def resolve_url(self, tenant_id: str | None) -> str:
        """Return the database URL that stores ``tenant_id``'s data."""

        if tenant_id is None:
            return self._settings.database_url
        template = self._settings.tenant_database_url_template
        if not template:
            raise ValueError(
                "Tenant databases are not configured; set TENANT_DATABASE_URL_TEMPLATE"
            )
        return template.format(tenant_id=validate_tenant_id(tenant_id))

    def get_engine(self, tenant_id: str | None) -> Engine:
        """Return the engine for ``tenant_id`` creating its schema on first use."""

        key = DEFAULT_TENANT_KEY if tenant_id is None else validate_tenant_id(tenant_id)
        with self._lock:
            engine = self._engines.get(key)
            if engine is None:
                url = self.resolve_url(tenant_id)
                engine = create_engine(url, **_engine_options(url))
                initialize_database(engine)
                self._engines[key] = engine
                self._session_factories[key] = sessionmaker(
                    autocommit=False, autoflush=False, bind=engine
                )
                logger.info("Initialized database engine for tenant %s", key)
            return engine

    def get_session(self, tenant_id: str | None) -> Session:
        """Open a new session against ``tenant_id``'s database."""

        self.get_engine(tenant_id)
        key = DEFAULT_TENANT_KEY if tenant_id is None else tenant_id
        return self._session_factories[key]()

    @contextmanager
    def session_scope(self, tenant_id: str | None) -> Iterator[Session]:
        """Yield a tenant session and close it afterwards."""

        session = self.get_session(tenant_id)
        try:
            yield session
        finally:
            session.close()

    def dispose(self) -> None:
        """Release every pooled connection held by the router."""

        with self._lock:
            for engine in self._engines.values():
                engine.dispose()
            self._engines.clear()
            self._session_factories.clear()


def initialize_database(engine: Engine) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from notifyhub.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


@lru_cache
def get_tenant_router() -> TenantRepositoryRouter:
    """Return the process-wide tenant router built from the settings."""

    return TenantRepositoryRouter(get_settings())


def reset_tenant_router() -> None:
    """Dispose the cached router so the next call rebuilds it."""

    if get_tenant_router.cache_info().currsize:
        get_tenant_router().dispose()
    get_tenant_router.cache_clear()

