"""Delivery channels and the dispatcher that coordinates them."""

from .dispatcher import ChannelDispatcher, ChannelEntry, DispatchResult
from .email import EmailChannel
from .in_app import InAppChannel
from .phone import normalize_phone_number
from .preferences import PreferenceResolver
from .push import PushChannel, PushDeliveryResult
from .scheduler import (
    DispatchScheduler,
    build_channel_dispatcher,
    get_dispatch_scheduler,
    reset_dispatch_scheduler,
)
from .sms import SmsChannel

__all__ = [
    "ChannelDispatcher",
    "ChannelEntry",
    "DispatchResult",
    "DispatchScheduler",
    "EmailChannel",
    "InAppChannel",
    "PreferenceResolver",
    "PushChannel",
    "PushDeliveryResult",
    "SmsChannel",
    "build_channel_dispatcher",
    "get_dispatch_scheduler",
    "normalize_phone_number",
    "reset_dispatch_scheduler",
]
