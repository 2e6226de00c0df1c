"""FastAPI dependency utilities."""

from collections.abc import Generator

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from notifyhub.application.channels import DispatchScheduler, get_dispatch_scheduler
from notifyhub.infrastructure.database import get_tenant_router, validate_tenant_id
from notifyhub.infrastructure.notifications import (
    RealtimeEventPublisher,
    notification_publisher,
)
from notifyhub.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def resolve_current_user_id(token: str) -> str:
    """Return the user id carried by ``token`` or raise ``401``."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """Return the id of the authenticated caller."""

    return resolve_current_user_id(token)


def get_tenant_id(x_tenant_id: str | None = Header(default=None)) -> str | None:
    """Return the tenant selected by the ``X-Tenant-ID`` header, if any."""

    if x_tenant_id is None or not x_tenant_id.strip():
        return None
    try:
        return validate_tenant_id(x_tenant_id.strip())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def get_tenant_db(
    tenant_id: str | None = Depends(get_tenant_id),
) -> Generator[Session, None, None]:
    """Yield a session bound to the caller's tenant database."""

    try:
        session = get_tenant_router().get_session(tenant_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    try:
        yield session
    finally:
        session.close()


def get_scheduler() -> DispatchScheduler:
    return get_dispatch_scheduler()


def get_publisher() -> RealtimeEventPublisher:
    return notification_publisher
