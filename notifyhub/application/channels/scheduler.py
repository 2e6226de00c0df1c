"""Run dispatches in the background, detached from the creating caller."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from functools import lru_cache

from notifyhub.config import Settings, get_settings
from notifyhub.domain.entities import Notification
from notifyhub.infrastructure.database import TenantRepositoryRouter, get_tenant_router
from notifyhub.infrastructure.email import SendGridEmailGateway
from notifyhub.infrastructure.notifications import (
    RealtimeEventPublisher,
    notification_publisher,
)
from notifyhub.infrastructure.push import WebPushGateway
from notifyhub.infrastructure.sms import TwilioSmsGateway

from .dispatcher import ChannelDispatcher, DispatchResult
from .email import EmailChannel
from .in_app import InAppChannel
from .preferences import PreferenceResolver
from .push import PushChannel
from .sms import SmsChannel

logger = logging.getLogger(__name__)


class DispatchScheduler:
    """Submit dispatches to a worker pool and log their outcome."""

    def __init__(self, dispatcher: ChannelDispatcher, *, max_workers: int = 4) -> None:
        self.dispatcher = dispatcher
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="notification-dispatch"
        )

    def schedule(
        self, notification: Notification, *, tenant_id: str | None = None
    ) -> Future[DispatchResult] | None:
        """Queue ``notification`` for delivery and return immediately."""

        try:
            future = self._executor.submit(
                self.dispatcher.dispatch, notification, tenant_id=tenant_id
            )
        except RuntimeError:
            logger.error(
                "Dispatch worker pool unavailable; notification %s will not be delivered",
                notification.id,
            )
            return None

        future.add_done_callback(lambda done: _log_outcome(notification, done))
        return future

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def _log_outcome(notification: Notification, future: Future[DispatchResult]) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Dispatch of notification %s failed: %s", notification.id, exc)
        return
    logger.info("Notification %s dispatched: %s", notification.id, future.result().as_dict())


def build_channel_dispatcher(
    settings: Settings,
    router: TenantRepositoryRouter,
    publisher: RealtimeEventPublisher,
) -> ChannelDispatcher:
    """Wire every channel with the gateways available in ``settings``.

    Gateways without configuration are ``None`` and their channel stays
    disabled for the lifetime of the dispatcher.
    """

    return ChannelDispatcher(
        PreferenceResolver(router),
        in_app=InAppChannel(publisher),
        email=EmailChannel(
            router, SendGridEmailGateway.from_settings(settings), app_name=settings.app_name
        ),
        sms=SmsChannel(
            router,
            TwilioSmsGateway.from_settings(settings),
            default_country_code=settings.default_country_code,
        ),
        push=PushChannel(
            router,
            WebPushGateway.from_settings(settings),
            icon=settings.push_icon,
            max_workers=settings.push_max_workers,
        ),
    )


@lru_cache
def get_dispatch_scheduler() -> DispatchScheduler:
    """Return the process-wide scheduler built from the settings."""

    settings = get_settings()
    dispatcher = build_channel_dispatcher(settings, get_tenant_router(), notification_publisher)
    return DispatchScheduler(dispatcher, max_workers=settings.dispatch_max_workers)


def reset_dispatch_scheduler() -> None:
    if get_dispatch_scheduler.cache_info().currsize:
        get_dispatch_scheduler().shutdown(wait=False)
    get_dispatch_scheduler.cache_clear()


__all__ = [
    "DispatchScheduler",
    "build_channel_dispatcher",
    "get_dispatch_scheduler",
    "reset_dispatch_scheduler",
]
