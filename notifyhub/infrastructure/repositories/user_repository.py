"""Read access to the user directory for the delivery channels."""

from __future__ import annotations

from sqlalchemy.orm import Session

from notifyhub.domain.entities import UserContact
from notifyhub.infrastructure.models import UserModel


class UserRepository:
    """Resolve recipient contact details inside one tenant's database."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_contact(self, user_id: str) -> UserContact | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: UserModel) -> UserContact:
        profile = model.profile
        return UserContact(
            id=model.id,
            email=model.email,
            phone_number=profile.phone_number if profile else None,
            first_name=model.first_name,
            last_name=model.last_name,
        )


__all__ = ["UserRepository"]
