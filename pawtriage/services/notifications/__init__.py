"""
Outbound responder notifications (sms, email).

Each transport may be left unconfigured; dispatch tolerates that.
"""

from .base import NotificationChannel
from .message import NotificationPayload, build_email_message, build_sms_message
from .registry import NotificationChannelRegistry, get_channel_registry

__all__ = [
    "NotificationChannel",
    "NotificationPayload",
    "NotificationChannelRegistry",
    "build_email_message",
    "build_sms_message",
    "get_channel_registry",
]
