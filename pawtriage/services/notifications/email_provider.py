"""
SMTP email channel.
"""

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional

from pawtriage.core.settings import settings
from .base import NotificationChannel
from .message import NotificationPayload, build_email_message

logger = logging.getLogger(__name__)


class SMTPEmailChannel(NotificationChannel):
    """
    HTML email delivery over SMTP with STARTTLS.

    Not configured unless both EMAIL_USER and EMAIL_PASSWORD are set.
    """

    name = "email"

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.host = host or settings.EMAIL_HOST
        self.port = port or settings.EMAIL_PORT
        self.user = user or settings.EMAIL_USER
        self.password = password or settings.EMAIL_PASSWORD
        self.timeout_seconds = timeout_seconds or settings.CHANNEL_TIMEOUT_SECONDS

    def is_configured(self) -> bool:
        return bool(self.user and self.password)

    def send(self, recipient: str, payload: NotificationPayload) -> bool:
        if not self.is_configured():
            logger.warning("⚠️ Email not configured, skipping email")
            return False

        subject, html = build_email_message(payload)
        msg = MIMEText(html, "html", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.user
        msg["To"] = recipient

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
                server.ehlo()
                server.starttls()
                server.ehlo()
                server.login(self.user, self.password)
                server.sendmail(self.user, [recipient], msg.as_string())
            logger.info(f"✅ Email sent to {recipient}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Email error for {recipient}: {e}")
            return False
