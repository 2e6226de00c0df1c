"""Read access to per-user settings stored as dotted keys."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from notifyhub.infrastructure.models import UserSettingModel


class SettingsRepository:
    """Expose a user's settings as a nested mapping."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_settings(self, entity_id: str, *, prefix: str | None = None) -> dict[str, Any]:
        """Return ``entity_id``'s settings nested by their dotted keys.

        With ``prefix="notifications"`` the key ``notifications.emailEnabled``
        is returned as ``{"emailEnabled": ...}``.
        """

        query = self.session.query(UserSettingModel).filter(
            UserSettingModel.entity_id == entity_id
        )
        if prefix:
            query = query.filter(UserSettingModel.key.like(f"{prefix}.%"))

        result: dict[str, Any] = {}
        for model in query.all():
            key = model.key[len(prefix) + 1 :] if prefix else model.key
            _set_nested_value(result, key, model.value)
        return result

    def set_value(self, entity_id: str, key: str, value: Any) -> None:
        model = (
            self.session.query(UserSettingModel)
            .filter(UserSettingModel.entity_id == entity_id, UserSettingModel.key == key)
            .one_or_none()
        )
        if model is None:
            model = UserSettingModel(entity_id=entity_id, key=key)
        model.value = value
        self.session.add(model)
        self.session.commit()


def _set_nested_value(target: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    current = target
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


__all__ = ["SettingsRepository"]
