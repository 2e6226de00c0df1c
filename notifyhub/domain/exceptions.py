"""Errors raised by the notification domain and its gateways."""

from __future__ import annotations


class NotificationNotFoundError(ValueError):
    """Raised when a notification id does not exist in the tenant's store."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class EmailDeliveryError(RuntimeError):
    """Raised when the email gateway rejects or fails to send a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SmsGatewayError(RuntimeError):
    """Raised when the SMS gateway reports an error code."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class PushDeliveryError(RuntimeError):
    """Raised when a push message could not be delivered to an endpoint."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PushEndpointGoneError(PushDeliveryError):
    """The push service reported that the endpoint no longer exists."""


__all__ = [
    "EmailDeliveryError",
    "NotificationNotFoundError",
    "PushDeliveryError",
    "PushEndpointGoneError",
    "SmsGatewayError",
]
