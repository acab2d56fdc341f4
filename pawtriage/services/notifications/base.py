"""
Notification Channel Base Interface.

Defines the contract for outbound responder notification transports.
"""

from abc import ABC, abstractmethod
import logging

from .message import NotificationPayload

logger = logging.getLogger(__name__)


class NotificationChannel(ABC):
    """
    Abstract base class for notification channels (sms, email).

    send() MUST:
    - Return False immediately when the channel is not configured
    - Return False (not raise) when delivery fails
    - Respect the transport timeout it is given
    """

    name: str = "channel"

    @abstractmethod
    def is_configured(self) -> bool:
        """True when credentials for this transport are present."""
        pass

    @abstractmethod
    def send(self, recipient: str, payload: NotificationPayload) -> bool:
        """
        Deliver one notification synchronously.

        Called from a worker thread by the dispatcher, which bounds
        the call with an overall timeout.
        """
        pass
