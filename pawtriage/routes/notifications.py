"""
Notification endpoints - lets operators check a transport end to end.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from pawtriage.models.base import BaseResponse
from pawtriage.services.notifications import (
    NotificationChannelRegistry,
    NotificationPayload,
    get_channel_registry,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])

TEST_METHODS = ("sms", "email")
TEST_INCIDENT_ID = "test-notification"


class NotificationTestRequest(BaseModel):
    method: Optional[str] = None
    recipient: Optional[str] = None


class NotificationTestResponse(BaseResponse):
    method: str
    recipient: str


def build_test_payload() -> NotificationPayload:
    return NotificationPayload(
        incident_id=TEST_INCIDENT_ID,
        severity="Test",
        location="Test notification, no action needed",
        hours_since_last_action=0,
        priority=1,
    )


@router.post("/test", response_model=NotificationTestResponse)
async def send_test_notification(
    request: NotificationTestRequest,
    registry: NotificationChannelRegistry = Depends(get_channel_registry),
):
    """
    Send a test message through one transport.

    **Errors:**
    - 400 when method or recipient is missing, or method is not sms|email
    - 500 when the transport is unconfigured or the send fails
    """
    method = (request.method or "").strip()
    recipient = (request.recipient or "").strip()
    if not method or not recipient:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Please provide both "method" (sms|email) and "recipient"',
        )
    if method not in TEST_METHODS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Method must be either "sms" or "email"',
        )

    channel = registry.get(method)
    if channel is None or not channel.is_configured():
        logger.warning(f"⚠️ Test {method} requested but the channel is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"The {method} channel is not configured",
        )

    logger.info(f"📧 Sending test {method} to {recipient}...")
    loop = asyncio.get_event_loop()
    sent = await loop.run_in_executor(None, channel.send, recipient, build_test_payload())
    if not sent:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to send test {method} to {recipient}",
        )

    return NotificationTestResponse(
        message=f"Test {method} sent successfully to {recipient}",
        method=method,
        recipient=recipient,
    )
