"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, func, select, update
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.orm import Query, Session

from notifyhub.domain.entities import (
    Notification,
    NotificationPriority,
    NotificationType,
)
from notifyhub.infrastructure.models import NotificationModel
from notifyhub.utils import ensure_utc, now_utc


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_entity(
        self,
        entity_id: str,
        *,
        offset: int = 0,
        limit: int | None = 10,
        is_read: bool | None = None,
        notification_type: NotificationType | None = None,
        priority: NotificationPriority | None = None,
    ) -> tuple[Sequence[Notification], int]:
        """Return one page of ``entity_id``'s notifications and the total count."""

        query = self._filtered_query(
            entity_id,
            is_read=is_read,
            notification_type=notification_type,
            priority=priority,
        )
        total = query.with_entities(func.count(NotificationModel.id)).scalar() or 0
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        ).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()], total

    def list_for_recipient(
        self, entity_id: str, *, entity_type: str | None = None
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.entity_id == entity_id
        )
        if entity_type is not None:
            query = query.filter(NotificationModel.entity_type == entity_type)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_entity(
        self, entity_id: str, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        query = self._filtered_query(entity_id, is_read=False).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, entity_id: str) -> int:
        query = self._filtered_query(entity_id, is_read=False)
        return query.with_entities(func.count(NotificationModel.id)).scalar() or 0

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        if notification.id is not None:
            model.id = notification.id
        now = now_utc()
        model.created_at = notification.created_at or now
        model.updated_at = notification.updated_at or now
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.is_read:
            model.is_read = True
            model.updated_at = now_utc()
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self, entity_id: str) -> list[str]:
        """Flip every unread row of ``entity_id`` and return the flipped ids."""

        return self._flip_unread(NotificationModel.entity_id == entity_id)

    def mark_many_as_read(self, entity_id: str, notification_ids: Sequence[str]) -> list[str]:
        """Flip the unread rows among ``notification_ids`` owned by ``entity_id``."""

        if not notification_ids:
            return []
        return self._flip_unread(
            and_(
                NotificationModel.entity_id == entity_id,
                NotificationModel.id.in_(list(notification_ids)),
            )
        )

    def _flip_unread(self, condition: ColumnElement[bool]) -> list[str]:
        """Mark unread rows matching ``condition`` as read.

        Only ids this call actually changed are returned; rows another
        session marked read in the meantime are left out.
        """

        unread = and_(condition, NotificationModel.is_read.is_(False))
        values = {"is_read": True, "updated_at": now_utc()}

        if self.session.get_bind().dialect.update_returning:
            result = self.session.execute(
                update(NotificationModel)
                .where(unread)
                .values(**values)
                .returning(NotificationModel.id)
                .execution_options(synchronize_session=False)
            )
            flipped = list(result.scalars())
        else:
            candidates = (
                self.session.execute(select(NotificationModel.id).where(unread)).scalars().all()
            )
            flipped = []
            for notification_id in candidates:
                result = self.session.execute(
                    update(NotificationModel)
                    .where(
                        NotificationModel.id == notification_id,
                        NotificationModel.is_read.is_(False),
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount:
                    flipped.append(notification_id)

        self.session.commit()
        return flipped

    def delete(self, notification_id: str) -> bool:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted > 0

    def delete_for_entity(self, entity_id: str) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.entity_id == entity_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _filtered_query(
        self,
        entity_id: str,
        *,
        is_read: bool | None = None,
        notification_type: NotificationType | None = None,
        priority: NotificationPriority | None = None,
    ) -> Query:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.entity_id == entity_id
        )
        if is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(is_read))
        if notification_type is not None:
            query = query.filter(NotificationModel.type == notification_type.value)
        if priority is not None:
            query = query.filter(NotificationModel.priority == priority.value)
        return query

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.title = notification.title
        model.message = notification.message
        model.type = NotificationType(notification.type).value
        model.priority = NotificationPriority(notification.priority).value
        model.entity_id = notification.entity_id
        model.entity_type = notification.entity_type
        model.meta = dict(notification.metadata or {})
        model.is_read = notification.is_read
        model.email_subject = notification.email_subject
        model.html_content = notification.html_content

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            title=model.title,
            message=model.message,
            type=NotificationType(model.type),
            priority=NotificationPriority(model.priority),
            entity_id=model.entity_id,
            entity_type=model.entity_type,
            metadata=model.meta or {},
            is_read=bool(model.is_read),
            email_subject=model.email_subject,
            html_content=model.html_content,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["NotificationRepository"]
