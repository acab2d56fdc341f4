"""
Notification Channel Registry.

Builds the channel set from configuration. Channels are always registered,
configured or not; an unconfigured channel reports it and is skipped at
send time so the dispatcher can still use the remaining ones.
"""

from typing import Dict, Optional
import logging

from pawtriage.models.incident import ContactMethod
from .base import NotificationChannel
from .email_provider import SMTPEmailChannel
from .sms_provider import TwilioSMSChannel

logger = logging.getLogger(__name__)

CHANNELS_FOR_METHOD = {
    ContactMethod.SMS: ["sms"],
    ContactMethod.EMAIL: ["email"],
    ContactMethod.BOTH: ["sms", "email"],
}


class NotificationChannelRegistry:
    def __init__(self, channels: Optional[Dict[str, NotificationChannel]] = None):
        if channels is None:
            channels = {"sms": TwilioSMSChannel(), "email": SMTPEmailChannel()}
        self.channels = channels

        for name, channel in self.channels.items():
            if channel.is_configured():
                logger.info(f"✅ Notification channel registered: {name}")
            else:
                logger.warning(f"⚠️ Notification channel '{name}' is not configured")

    def get(self, name: str) -> Optional[NotificationChannel]:
        return self.channels.get(name)

    def channels_for(self, method: ContactMethod):
        return CHANNELS_FOR_METHOD[ContactMethod(method)]


_registry: Optional[NotificationChannelRegistry] = None


def get_channel_registry() -> NotificationChannelRegistry:
    global _registry
    if _registry is None:
        _registry = NotificationChannelRegistry()
    return _registry
