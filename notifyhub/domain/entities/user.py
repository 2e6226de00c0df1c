"""Domain entity with the contact details of a notification recipient."""

from dataclasses import dataclass


@dataclass
class UserContact:
    """Addresses the delivery channels need to reach a user."""

    id: str
    email: str | None
    phone_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None


__all__ = ["UserContact"]
