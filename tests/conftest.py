"""
Shared fixtures: an in-memory record store and fake notification channels.
"""

import time
from datetime import timedelta

import pytest

from pawtriage.services.notifications import NotificationChannel, NotificationChannelRegistry
from pawtriage.services.record_store import (
    INCIDENTS,
    RESOURCES,
    RESPONDERS,
    InMemoryRecordStore,
)
from pawtriage.utils.time_helpers import utc_now


DEFAULT_RESOURCES = {
    "res-rescue-1": {"type": "rescue_team", "name": "Rescue Unit 1", "availability": "available"},
    "res-vet-1": {"type": "veterinarian", "name": "City Vet", "availability": "available"},
    "res-control-1": {"type": "animal_control", "name": "Animal Control East", "availability": "available"},
    "res-rescue-busy": {"type": "rescue_team", "name": "Rescue Unit 2", "availability": "busy"},
}

DEFAULT_RESPONDERS = {
    "agent-both": {
        "name": "Ravi",
        "availability": "on_duty",
        "contact_info": {"phone": "+919800000001", "email": "ravi@example.org", "preferred_method": "both"},
    },
    "agent-sms": {
        "name": "Meera",
        "availability": "on_duty",
        "contact_info": {"phone": "+919800000002", "preferred_method": "sms"},
    },
    "agent-off": {
        "name": "Off Shift",
        "availability": "off_duty",
        "contact_info": {"phone": "+919800000003", "preferred_method": "sms"},
    },
}


class FakeChannel(NotificationChannel):
    """Records every send; outcome and latency are configurable."""

    def __init__(self, name, configured=True, succeed=True, delay=0.0):
        self.name = name
        self.configured = configured
        self.succeed = succeed
        self.delay = delay
        self.sent = []

    def is_configured(self):
        return self.configured

    def send(self, recipient, payload):
        if self.delay:
            time.sleep(self.delay)
        self.sent.append((recipient, payload))
        return self.succeed


@pytest.fixture
def make_incident():
    """Factory for stored incident documents."""

    def _make(severity="Severe", status="Reported", created_hours_ago=0.0, **extra):
        created_at = utc_now() - timedelta(hours=created_hours_ago)
        record = {
            "severity": severity,
            "status": status,
            "description": "Dog bite reported by a resident",
            "location": {"address": "MG Road, Bengaluru", "latitude": 12.9716, "longitude": 77.5946},
            "escalation_status": "normal",
            "created_at": created_at,
            "updated_at": created_at,
        }
        record.update(extra)
        return record

    return _make


@pytest.fixture
def build_store():
    """Factory for a seeded in-memory store."""

    def _build(incidents=None, responders=None, resources=None):
        return InMemoryRecordStore(seed={
            INCIDENTS: incidents or {},
            RESPONDERS: DEFAULT_RESPONDERS if responders is None else responders,
            RESOURCES: DEFAULT_RESOURCES if resources is None else resources,
        })

    return _build


@pytest.fixture
def sms_channel():
    return FakeChannel("sms")


@pytest.fixture
def email_channel():
    return FakeChannel("email")


@pytest.fixture
def registry(sms_channel, email_channel):
    return NotificationChannelRegistry(channels={"sms": sms_channel, "email": email_channel})


@pytest.fixture
def fake_channel():
    """Factory for extra fake channels with custom behaviour."""
    return FakeChannel
