"""SQLAlchemy models for the user directory read by the delivery channels."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from notifyhub.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a tenant user."""

    __tablename__ = "user"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    profile = relationship(
        "ProfileModel", back_populates="user", uselist=False, lazy="joined"
    )


class ProfileModel(Base):
    """Optional profile details such as the user's phone number."""

    __tablename__ = "profile"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    phone_number = Column(String(32), nullable=True)

    user = relationship("UserModel", back_populates="profile")


__all__ = ["ProfileModel", "UserModel"]
