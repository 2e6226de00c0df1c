"""SQLAlchemy model for per-user settings stored as dotted keys."""

from sqlalchemy import JSON, Column, Integer, String, UniqueConstraint

from notifyhub.infrastructure.database import Base


class UserSettingModel(Base):
    """Single setting value such as ``notifications.emailEnabled``."""

    __tablename__ = "user_setting"
    __table_args__ = (
        UniqueConstraint("entity_id", "key", name="uq_user_setting_entity_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_id = Column(String(64), nullable=False, index=True)
    key = Column(String(255), nullable=False)
    value = Column(JSON, nullable=True)


__all__ = ["UserSettingModel"]
