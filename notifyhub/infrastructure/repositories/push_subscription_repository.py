"""Persistence helpers for push subscription entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import PushSubscription, PushSubscriptionKeys
from notifyhub.infrastructure.models import PushSubscriptionModel
from notifyhub.utils import ensure_utc, now_utc


class PushSubscriptionRepository:
    """Provide CRUD operations for :class:`PushSubscription` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: str) -> Sequence[PushSubscription]:
        query = (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.user_id == user_id)
            .order_by(PushSubscriptionModel.created_at.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def get_by_endpoint(self, user_id: str, endpoint: str) -> PushSubscription | None:
        model = self._get_model(user_id, endpoint)
        return self._to_entity(model) if model else None

    def upsert(self, subscription: PushSubscription) -> tuple[PushSubscription, bool]:
        """Insert ``subscription`` or update the row sharing its user and endpoint.

        Returns the persisted entity and whether a new row was created.
        """

        model = self._get_model(subscription.user_id, subscription.endpoint)
        created = model is None
        if model is None:
            model = PushSubscriptionModel(
                user_id=subscription.user_id,
                endpoint=subscription.endpoint,
                created_at=now_utc(),
            )
        model.p256dh = subscription.keys.p256dh
        model.auth = subscription.keys.auth
        model.user_agent = subscription.user_agent
        model.device_id = subscription.device_id
        model.updated_at = now_utc()
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model), created

    def delete_by_endpoint(self, user_id: str, endpoint: str) -> bool:
        deleted = (
            self.session.query(PushSubscriptionModel)
            .filter(
                PushSubscriptionModel.user_id == user_id,
                PushSubscriptionModel.endpoint == endpoint,
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted > 0

    def delete_by_id(self, subscription_id: str) -> bool:
        deleted = (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.id == subscription_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted > 0

    def delete_for_user(self, user_id: str) -> int:
        deleted = (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _get_model(self, user_id: str, endpoint: str) -> PushSubscriptionModel | None:
        return (
            self.session.query(PushSubscriptionModel)
            .filter(
                PushSubscriptionModel.user_id == user_id,
                PushSubscriptionModel.endpoint == endpoint,
            )
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: PushSubscriptionModel) -> PushSubscription:
        return PushSubscription(
            id=model.id,
            user_id=model.user_id,
            endpoint=model.endpoint,
            keys=PushSubscriptionKeys(p256dh=model.p256dh, auth=model.auth),
            user_agent=model.user_agent,
            device_id=model.device_id,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["PushSubscriptionRepository"]
