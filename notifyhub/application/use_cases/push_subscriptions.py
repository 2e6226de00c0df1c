"""Use cases for managing browser push subscriptions."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from notifyhub.domain.entities import PushSubscription, PushSubscriptionKeys
from notifyhub.infrastructure.repositories import PushSubscriptionRepository

logger = logging.getLogger(__name__)


def save_subscription(
    session: Session,
    user_id: str,
    *,
    endpoint: str,
    keys: PushSubscriptionKeys,
    user_agent: str | None = None,
    device_id: str | None = None,
) -> PushSubscription:
    """Register ``endpoint`` for ``user_id`` or refresh the existing registration."""

    if not endpoint:
        raise ValueError("Push subscription endpoint is required")

    subscription = PushSubscription(
        id=None,
        user_id=user_id,
        endpoint=endpoint,
        keys=keys,
        user_agent=user_agent,
        device_id=device_id,
    )
    saved, created = PushSubscriptionRepository(session).upsert(subscription)
    if created:
        logger.info("Created push subscription %s for user %s", saved.id, user_id)
    else:
        logger.info("Updated push subscription %s for user %s", saved.id, user_id)
    return saved


def remove_subscription(session: Session, user_id: str, endpoint: str) -> bool:
    """Delete ``user_id``'s subscription for ``endpoint``; ``True`` if one existed."""

    return PushSubscriptionRepository(session).delete_by_endpoint(user_id, endpoint)


def remove_all_subscriptions(session: Session, user_id: str) -> int:
    """Delete every subscription of ``user_id`` and return how many were removed."""

    removed = PushSubscriptionRepository(session).delete_for_user(user_id)
    logger.info("Removed %s push subscription(s) for user %s", removed, user_id)
    return removed


def get_user_subscriptions(session: Session, user_id: str) -> list[PushSubscription]:
    subscriptions = list(PushSubscriptionRepository(session).list_for_user(user_id))
    logger.debug("Found %s push subscription(s) for user %s", len(subscriptions), user_id)
    return subscriptions


def delete_subscription(session: Session, subscription_id: str) -> bool:
    return PushSubscriptionRepository(session).delete_by_id(subscription_id)


__all__ = [
    "delete_subscription",
    "get_user_subscriptions",
    "remove_all_subscriptions",
    "remove_subscription",
    "save_subscription",
]
