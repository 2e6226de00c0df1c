"""SQLAlchemy model for browser push subscriptions."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_utc


class PushSubscriptionModel(Base):
    """Database representation of one push endpoint of a user."""

    __tablename__ = "push_subscription"
    __table_args__ = (
        UniqueConstraint("user_id", "endpoint", name="uq_push_subscription_user_endpoint"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    endpoint = Column(Text, nullable=False)
    p256dh = Column(String(255), nullable=False)
    auth = Column(String(255), nullable=False)
    user_agent = Column(String(512), nullable=True)
    device_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )


__all__ = ["PushSubscriptionModel"]
