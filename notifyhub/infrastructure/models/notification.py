"""SQLAlchemy model for persisted notifications."""

from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, String, Text

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_utc


def _new_id() -> str:
    return str(uuid4())


class NotificationModel(Base):
    """Database representation for recipient notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_entity_read", "entity_id", "is_read"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="info")
    priority = Column(String(20), nullable=False, default="normal")
    entity_id = Column(String(64), nullable=True, index=True)
    entity_type = Column(String(50), nullable=True)
    # ``metadata`` is reserved on declarative classes.
    meta = Column("metadata", JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    email_subject = Column(String(255), nullable=True)
    html_content = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )


__all__ = ["NotificationModel"]
