"""
Tests for responder notification fan-out.
"""

from datetime import timedelta

import pytest

from pawtriage.core.exceptions import IncidentNotFoundError
from pawtriage.services.contact_dispatcher import ContactDispatcher
from pawtriage.services.notifications import NotificationChannelRegistry
from pawtriage.utils.time_helpers import utc_now


def make_dispatcher(store, registry, timeout=1.0):
    return ContactDispatcher(store=store, registry=registry, max_responders=5, channel_timeout=timeout)


class TestDispatch:
    @pytest.mark.asyncio
    async def test_contacts_on_duty_responders(self, build_store, make_incident, registry, sms_channel, email_channel):
        store = build_store(incidents={"inc-12345678abc": make_incident(priority=9, created_hours_ago=30)})

        result = await make_dispatcher(store, registry).dispatch("inc-12345678abc")

        assert result.contacted == 2
        assert result.failed == 0
        assert set(result.contacted_agent_ids) == {"agent-both", "agent-sms"}
        # agent-both gets sms and email, agent-sms only sms, off-duty nobody
        assert {r for r, _ in sms_channel.sent} == {"+919800000001", "+919800000002"}
        assert [r for r, _ in email_channel.sent] == ["ravi@example.org"]

        payload = sms_channel.sent[0][1]
        assert payload.display_id == "inc-1234"
        assert payload.urgency_badge == "🔴 CRITICAL"
        assert payload.hours_since_last_action == 30

        stored = await store.get("incidents", "inc-12345678abc")
        assert stored["escalation_status"] == "auto_contacted"
        assert set(stored["auto_contacted_agents"]) == {"agent-both", "agent-sms"}

    @pytest.mark.asyncio
    async def test_any_channel_success_counts(self, build_store, make_incident, email_channel, fake_channel):
        failing_sms = fake_channel("sms", succeed=False)
        registry = NotificationChannelRegistry(channels={"sms": failing_sms, "email": email_channel})
        store = build_store(incidents={"inc-1": make_incident()})

        result = await make_dispatcher(store, registry).dispatch("inc-1")

        # agent-both reached by email, agent-sms has no other channel
        assert result.contacted_agent_ids == ["agent-both"]
        assert result.failed == 1

    @pytest.mark.asyncio
    async def test_email_failure_with_sms_success_still_counts(self, build_store, make_incident, sms_channel, fake_channel):
        failing_email = fake_channel("email", succeed=False)
        registry = NotificationChannelRegistry(channels={"sms": sms_channel, "email": failing_email})
        store = build_store(incidents={"inc-1": make_incident()})

        result = await make_dispatcher(store, registry).dispatch("inc-1")

        assert set(result.contacted_agent_ids) == {"agent-both", "agent-sms"}
        assert result.failed == 0
        assert [r for r, _ in failing_email.sent] == ["ravi@example.org"]

    @pytest.mark.asyncio
    async def test_unconfigured_channel_is_a_failed_attempt(self, build_store, make_incident, email_channel, fake_channel):
        unconfigured_sms = fake_channel("sms", configured=False)
        registry = NotificationChannelRegistry(channels={"sms": unconfigured_sms, "email": email_channel})
        store = build_store(incidents={"inc-1": make_incident()})

        result = await make_dispatcher(store, registry).dispatch("inc-1")

        assert unconfigured_sms.sent == []
        assert result.contacted == 1
        assert result.failed == 1

    @pytest.mark.asyncio
    async def test_slow_channel_times_out(self, build_store, make_incident, email_channel, fake_channel):
        slow_sms = fake_channel("sms", delay=0.5)
        registry = NotificationChannelRegistry(channels={"sms": slow_sms, "email": email_channel})
        store = build_store(incidents={"inc-1": make_incident()})

        result = await make_dispatcher(store, registry, timeout=0.05).dispatch("inc-1")

        assert result.contacted_agent_ids == ["agent-both"]
        assert result.failed == 1

    @pytest.mark.asyncio
    async def test_no_responders_is_zero_count_success(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-1": make_incident()}, responders={})

        result = await make_dispatcher(store, registry).dispatch("inc-1")

        assert result.no_responders is True
        assert result.contacted == 0
        assert result.failed == 0
        stored = await store.get("incidents", "inc-1")
        assert stored["escalation_status"] == "normal"

    @pytest.mark.asyncio
    async def test_malformed_responder_is_skipped(self, build_store, make_incident, registry):
        responders = {
            "agent-bad": {"availability": "on_duty", "contact_info": {"preferred_method": "pigeon"}},
            "agent-ok": {"availability": "on_duty", "contact_info": {"phone": "+911", "preferred_method": "sms"}},
        }
        store = build_store(incidents={"inc-1": make_incident()}, responders=responders)

        result = await make_dispatcher(store, registry).dispatch("inc-1")

        assert result.contacted_agent_ids == ["agent-ok"]

    @pytest.mark.asyncio
    async def test_second_dispatch_keeps_auto_contacted(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-1": make_incident(escalation_status="auto_contacted")})

        result = await make_dispatcher(store, registry).dispatch("inc-1")

        assert result.contacted == 2
        stored = await store.get("incidents", "inc-1")
        assert stored["escalation_status"] == "auto_contacted"

    @pytest.mark.asyncio
    async def test_manual_dispatch_stamps_escalated_at(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-1": make_incident()})

        await make_dispatcher(store, registry).dispatch("inc-1")

        stored = await store.get("incidents", "inc-1")
        assert stored["escalation_status"] == "auto_contacted"
        assert stored["escalated_at"] == stored["updated_at"]

    @pytest.mark.asyncio
    async def test_existing_escalated_at_is_kept(self, build_store, make_incident, registry):
        escalated_at = utc_now() - timedelta(hours=2)
        store = build_store(incidents={
            "inc-1": make_incident(escalation_status="escalated", escalated_at=escalated_at),
        })

        await make_dispatcher(store, registry).dispatch("inc-1")

        stored = await store.get("incidents", "inc-1")
        assert stored["escalated_at"] == escalated_at

    @pytest.mark.asyncio
    async def test_missing_incident(self, build_store, registry):
        with pytest.raises(IncidentNotFoundError):
            await make_dispatcher(build_store(), registry).dispatch("missing")
