"""
Twilio SMS channel.

Talks to the Twilio REST API directly over requests; no Twilio SDK.
"""

import logging
from typing import Optional

import requests

from pawtriage.core.settings import settings
from .base import NotificationChannel
from .message import NotificationPayload, build_sms_message

logger = logging.getLogger(__name__)


class TwilioSMSChannel(NotificationChannel):
    """
    SMS delivery through Twilio's Messages endpoint.

    - Not configured unless account sid, auth token and sender number are set
    - Uses a strict request timeout
    - Never raises upstream exceptions; returns False on failure
    """

    name = "sms"
    BASE_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self.from_number = from_number or settings.TWILIO_PHONE_NUMBER
        self.timeout_seconds = timeout_seconds or settings.CHANNEL_TIMEOUT_SECONDS

    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def send(self, recipient: str, payload: NotificationPayload) -> bool:
        if not self.is_configured():
            logger.warning("⚠️ Twilio not configured, skipping SMS")
            return False

        try:
            resp = requests.post(
                self.BASE_URL.format(account_sid=self.account_sid),
                data={
                    "To": recipient,
                    "From": self.from_number,
                    "Body": build_sms_message(payload),
                },
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout_seconds,
            )
            if resp.status_code not in (200, 201):
                logger.error(f"❌ SMS error for {recipient}: Twilio returned status {resp.status_code}")
                return False

            logger.info(f"✅ SMS sent to {recipient}")
            return True
        except requests.RequestException as e:
            logger.error(f"❌ SMS error for {recipient}: {e}")
            return False
