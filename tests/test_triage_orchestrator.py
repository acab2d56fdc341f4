"""
Tests for the triage orchestrator and the scheduled escalation pass.
"""

import pytest

from pawtriage.core.exceptions import IncidentNotFoundError, RecordStoreError, TriageStageError
from pawtriage.models.incident import Incident, RecommendationStatus, ResourceType
from pawtriage.models.triage import ActionPriority, UrgencyLevel
from pawtriage.services.agents import EscalationMonitor, ResourceAllocator
from pawtriage.services.contact_dispatcher import ContactDispatcher
from pawtriage.services.record_store import InMemoryRecordStore
from pawtriage.services.triage_orchestrator import TriageOrchestrator


class FailingResourceStore(InMemoryRecordStore):
    """Incident reads work, resource queries fail."""

    async def query(self, collection, filters=(), limit=None, start_after=None):
        if collection == "governmentResources":
            raise RecordStoreError("resource pool offline")
        return await super().query(collection, filters, limit, start_after)


class FailingDispatcher:
    def __init__(self, failing_id, inner):
        self.failing_id = failing_id
        self.inner = inner

    async def dispatch(self, incident_id):
        if incident_id == self.failing_id:
            raise RecordStoreError("write rejected")
        return await self.inner.dispatch(incident_id)


def make_orchestrator(store, registry, dispatcher=None):
    return TriageOrchestrator(
        store=store,
        allocator=ResourceAllocator(store=store, query_limit=5, max_allocated=3),
        monitor=EscalationMonitor(store=store, threshold_hours=24),
        dispatcher=dispatcher or ContactDispatcher(store=store, registry=registry, max_responders=5, channel_timeout=1.0),
    )


class TestProcessIncident:
    @pytest.mark.asyncio
    async def test_severe_incident_end_to_end(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-severe": make_incident(severity="Severe")})

        result = await make_orchestrator(store, registry).process_incident("inc-severe")

        assert result.priority.priority == 10
        assert result.priority.urgency_level == UrgencyLevel.CRITICAL
        immediate = [a for a in result.actions if a.priority == ActionPriority.IMMEDIATE]
        assert len(immediate) >= 2
        assert {r.type for r in result.resources} == {
            ResourceType.RESCUE_TEAM,
            ResourceType.VETERINARIAN,
            ResourceType.ANIMAL_CONTROL,
        }

        stored = await store.get("incidents", "inc-severe")
        incident = Incident(**stored)
        assert incident.priority == 10
        assert incident.escalation_status.value == "normal"
        assert incident.last_action_timestamp is not None
        assert len(incident.assigned_resources) == 3
        assert [r.agent_type.value for r in incident.ai_recommendations] == ["priority", "action", "resource"]
        assert [r.confidence for r in incident.ai_recommendations] == [0.85, 0.80, 0.75]
        for recommendation in incident.ai_recommendations:
            assert recommendation.status == RecommendationStatus.PENDING
            assert recommendation.status_history[0].status == RecommendationStatus.PENDING

    @pytest.mark.asyncio
    async def test_minor_incident(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-minor": make_incident(severity="Minor")})

        result = await make_orchestrator(store, registry).process_incident("inc-minor")

        # 1 + 2 + 2 + 2
        assert result.priority.priority == 7
        assert [r.type for r in result.resources] == [ResourceType.ANIMAL_CONTROL]

    @pytest.mark.asyncio
    async def test_retriage_appends_recommendations(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-1": make_incident()})
        orchestrator = make_orchestrator(store, registry)

        await orchestrator.process_incident("inc-1")
        await orchestrator.process_incident("inc-1")

        stored = await store.get("incidents", "inc-1")
        assert len(stored["ai_recommendations"]) == 6

    @pytest.mark.asyncio
    async def test_retriage_does_not_regress_escalation(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-1": make_incident(escalation_status="escalated")})

        await make_orchestrator(store, registry).process_incident("inc-1")

        stored = await store.get("incidents", "inc-1")
        assert stored["escalation_status"] == "escalated"

    @pytest.mark.asyncio
    async def test_stage_failure_leaves_incident_untouched(self, make_incident, registry):
        store = FailingResourceStore(seed={"incidents": {"inc-1": make_incident()}})
        before = await store.get("incidents", "inc-1")

        with pytest.raises(TriageStageError) as excinfo:
            await make_orchestrator(store, registry).process_incident("inc-1")

        assert excinfo.value.stage == "resource"
        assert await store.get("incidents", "inc-1") == before

    @pytest.mark.asyncio
    async def test_invalid_severity_fails_priority_stage(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-1": make_incident(severity="Catastrophic")})

        with pytest.raises(TriageStageError) as excinfo:
            await make_orchestrator(store, registry).process_incident("inc-1")

        assert excinfo.value.stage == "priority"

    @pytest.mark.asyncio
    async def test_missing_incident(self, build_store, registry):
        with pytest.raises(IncidentNotFoundError):
            await make_orchestrator(build_store(), registry).process_incident("missing")


class TestScheduledEscalation:
    @pytest.mark.asyncio
    async def test_delayed_incident_is_escalated(self, build_store, make_incident, registry):
        store = build_store(incidents={
            "inc-stale": make_incident(created_hours_ago=30),
            "inc-fresh": make_incident(created_hours_ago=1),
        })

        escalated = await make_orchestrator(store, registry).process_delayed_incidents()

        assert escalated == ["inc-stale"]
        stored = await store.get("incidents", "inc-stale")
        assert stored["escalation_status"] == "escalated"
        assert stored["escalated_at"] is not None
        fresh = await store.get("incidents", "inc-fresh")
        assert fresh["escalation_status"] == "normal"

    @pytest.mark.asyncio
    async def test_already_escalated_is_reselected_without_rewrite(self, build_store, make_incident, registry):
        store = build_store(incidents={
            "inc-1": make_incident(created_hours_ago=30, escalation_status="escalated", escalated_at="marker"),
        })

        escalated = await make_orchestrator(store, registry).process_delayed_incidents()

        assert escalated == ["inc-1"]
        stored = await store.get("incidents", "inc-1")
        assert stored["escalated_at"] == "marker"

    @pytest.mark.asyncio
    async def test_auto_contacted_is_not_reselected(self, build_store, make_incident, registry):
        store = build_store(incidents={
            "inc-1": make_incident(created_hours_ago=30, escalation_status="auto_contacted"),
        })

        assert await make_orchestrator(store, registry).process_delayed_incidents() == []

    @pytest.mark.asyncio
    async def test_run_dispatches_each_escalated_incident(self, build_store, make_incident, registry):
        store = build_store(incidents={
            "inc-a": make_incident(created_hours_ago=30),
            "inc-b": make_incident(status="Under Review", created_hours_ago=48),
        })

        summary = await make_orchestrator(store, registry).run_scheduled_escalation()

        assert summary.escalated_ids == ["inc-a", "inc-b"]
        assert [d.contacted for d in summary.dispatches] == [2, 2]
        for incident_id in ("inc-a", "inc-b"):
            stored = await store.get("incidents", incident_id)
            assert stored["escalation_status"] == "auto_contacted"

    @pytest.mark.asyncio
    async def test_dispatch_failure_does_not_abort_batch(self, build_store, make_incident, registry):
        store = build_store(incidents={
            "inc-a": make_incident(created_hours_ago=30),
            "inc-b": make_incident(created_hours_ago=30),
        })
        inner = ContactDispatcher(store=store, registry=registry, max_responders=5, channel_timeout=1.0)

        summary = await make_orchestrator(
            store, registry, dispatcher=FailingDispatcher("inc-a", inner)
        ).run_scheduled_escalation()

        assert summary.dispatch_failures == ["inc-a"]
        assert [d.incident_id for d in summary.dispatches] == ["inc-b"]

    @pytest.mark.asyncio
    async def test_nothing_delayed(self, build_store, make_incident, registry):
        store = build_store(incidents={"inc-1": make_incident(created_hours_ago=3)})

        summary = await make_orchestrator(store, registry).run_scheduled_escalation()

        assert summary.escalated_ids == []
        assert summary.dispatches == []
