"""
Notification payload and message formatting for escalated incidents.

The rendered SMS/email text is a wire contract with responders:
- incident id truncated to 8 characters
- severity, priority (N/10), location address
- hours since last action, rounded
- urgency emoji + word, same thresholds as the priority scorer
"""

from typing import Dict, Optional, Tuple

from pawtriage.core.settings import settings
from pawtriage.models.triage import UrgencyLevel
from pawtriage.services.agents.priority_scorer import classify_urgency

DEFAULT_PRIORITY = 5
DISPLAY_ID_LENGTH = 8

URGENCY_EMOJI = {
    UrgencyLevel.CRITICAL: "🔴",
    UrgencyLevel.HIGH: "🟠",
    UrgencyLevel.MEDIUM: "🟡",
    UrgencyLevel.LOW: "🟢",
}


class NotificationPayload:
    """Everything a responder needs to act on an escalated incident."""

    def __init__(
        self,
        incident_id: str,
        severity: str,
        location: str,
        hours_since_last_action: float,
        priority: Optional[int] = None,
    ):
        self.incident_id = incident_id
        self.severity = severity
        self.location = location or "Unknown location"
        self.hours_since_last_action = round(hours_since_last_action)
        self.priority = priority if priority is not None else DEFAULT_PRIORITY

    @property
    def display_id(self) -> str:
        return self.incident_id[:DISPLAY_ID_LENGTH]

    @property
    def urgency_word(self) -> str:
        return classify_urgency(self.priority).value.upper()

    @property
    def urgency_emoji(self) -> str:
        return URGENCY_EMOJI[classify_urgency(self.priority)]

    @property
    def urgency_badge(self) -> str:
        return f"{self.urgency_emoji} {self.urgency_word}"

    def to_dict(self) -> Dict:
        return {
            "incident_id": self.incident_id,
            "display_id": self.display_id,
            "severity": self.severity,
            "priority": self.priority,
            "location": self.location,
            "hours_since_last_action": self.hours_since_last_action,
            "urgency": self.urgency_word,
            "urgency_emoji": self.urgency_emoji,
        }


def build_sms_message(payload: NotificationPayload) -> str:
    return (
        f"{payload.urgency_badge} SAFEPAW ALERT\n\n"
        f"Incident ID: {payload.display_id}\n"
        f"Severity: {payload.severity}\n"
        f"Priority: {payload.priority}/10\n"
        f"Location: {payload.location}\n"
        f"Delayed: {payload.hours_since_last_action} hours\n\n"
        f"Action required immediately."
    )


def build_email_message(payload: NotificationPayload) -> Tuple[str, str]:
    """Returns (subject, html body)."""
    subject = (
        f"{payload.urgency_badge} SafePaw Alert: Escalated {payload.severity} "
        f"Incident - {payload.display_id}"
    )
    severity_color = "#d32f2f" if payload.severity == "Severe" else "#ff9800"
    incident_url = f"{settings.PORTAL_BASE_URL.rstrip('/')}/incidents/{payload.incident_id}"

    html = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2 style="color: #d32f2f;">{payload.urgency_badge} SafePaw Incident Alert</h2>
            <div style="background: #fff3e0; padding: 20px; border-left: 4px solid #ff9800;">
                <h3>Escalated Incident Requires Immediate Attention</h3>
                <table style="width: 100%; margin-top: 15px;">
                    <tr><td style="padding: 8px; font-weight: bold;">Incident ID:</td>
                        <td style="padding: 8px;">{payload.display_id}</td></tr>
                    <tr><td style="padding: 8px; font-weight: bold;">Severity:</td>
                        <td style="padding: 8px;"><span style="color: {severity_color};">{payload.severity}</span></td></tr>
                    <tr><td style="padding: 8px; font-weight: bold;">Priority:</td>
                        <td style="padding: 8px;">{payload.priority}/10</td></tr>
                    <tr><td style="padding: 8px; font-weight: bold;">Location:</td>
                        <td style="padding: 8px;">{payload.location}</td></tr>
                    <tr><td style="padding: 8px; font-weight: bold;">Time Delayed:</td>
                        <td style="padding: 8px;"><strong>{payload.hours_since_last_action} hours</strong></td></tr>
                </table>
            </div>
            <p style="margin-top: 20px;">This incident has been automatically escalated due to inaction. Please review and take appropriate action immediately.</p>
            <a href="{incident_url}" style="display: inline-block; margin-top: 15px; padding: 12px 24px; background: #1976d2; color: white; text-decoration: none; border-radius: 4px;">View Incident Details</a>
        </div>
    """
    return subject, html
