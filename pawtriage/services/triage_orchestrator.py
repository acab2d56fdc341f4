"""
Triage Orchestrator - composes the rule agents for one incident.

Flow (strictly sequential, each stage feeds the next):
1. Priority Scorer
2. Action Recommender (uses the computed priority)
3. Resource Allocator (uses the computed priority)
4. ONE consolidated update of the incident

Any stage failure aborts the run before step 4, so the incident is left
untouched. Nothing here retries; the invoking trigger decides.

The scheduled escalation pass also lives here: the monitor classifies,
this module writes the escalation state and hands off to the dispatcher.
"""

import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from pawtriage.core.exceptions import IncidentNotFoundError, TriageError, TriageStageError
from pawtriage.models.incident import (
    AgentType,
    EscalationStatus,
    RecommendationStatus,
    Severity,
    is_forward_transition,
)
from pawtriage.models.triage import (
    ActionInput,
    AllocationInput,
    EscalationCheck,
    EscalationRunSummary,
    PriorityInput,
    TriageResult,
)
from pawtriage.services.agents import (
    ActionRecommender,
    EscalationMonitor,
    PriorityScorer,
    ResourceAllocator,
    required_resource_types,
)
from pawtriage.services.contact_dispatcher import ContactDispatcher, get_contact_dispatcher
from pawtriage.services.record_store import INCIDENTS, RecordStore, get_record_store
from pawtriage.utils.time_helpers import generate_id, hours_since, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Configuration: confidence attached to each agent's recommendation record
AGENT_CONFIDENCE = {
    AgentType.PRIORITY: 0.85,
    AgentType.ACTION: 0.80,
    AgentType.RESOURCE: 0.75,
}

# Configuration: location risk and resource availability estimates (0-3).
# No proximity data exists yet, so these come from severity alone.
SEVERE_LOCATION_RISK = 3
DEFAULT_LOCATION_RISK = 2
DEFAULT_RESOURCE_AVAILABILITY = 2


def estimate_location_risk(severity: Severity) -> int:
    return SEVERE_LOCATION_RISK if severity == Severity.SEVERE else DEFAULT_LOCATION_RISK


def build_recommendation(agent_type: AgentType, reasoning: str, now) -> dict:
    """A pending recommendation record with its first status entry."""
    return {
        "id": generate_id(agent_type.value),
        "agent_type": agent_type.value,
        "recommendation": reasoning,
        "confidence": AGENT_CONFIDENCE[agent_type],
        "timestamp": now,
        "status": RecommendationStatus.PENDING.value,
        "status_history": [
            {
                "status": RecommendationStatus.PENDING.value,
                "changed_by": "system",
                "reason": "",
                "timestamp": now,
            }
        ],
    }


class TriageOrchestrator:
    def __init__(
        self,
        store: Optional[RecordStore] = None,
        scorer: Optional[PriorityScorer] = None,
        recommender: Optional[ActionRecommender] = None,
        allocator: Optional[ResourceAllocator] = None,
        monitor: Optional[EscalationMonitor] = None,
        dispatcher: Optional[ContactDispatcher] = None,
    ):
        self.store = store or get_record_store()
        self.scorer = scorer or PriorityScorer()
        self.recommender = recommender or ActionRecommender()
        self.allocator = allocator or ResourceAllocator(store=self.store)
        self.monitor = monitor or EscalationMonitor(store=self.store)
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> ContactDispatcher:
        if self._dispatcher is None:
            self._dispatcher = get_contact_dispatcher()
        return self._dispatcher

    async def _run_stage(self, stage: str, step: Callable[[], Awaitable[T]]) -> T:
        try:
            return await step()
        except TriageError as e:
            logger.error(f"❌ Stage '{stage}' failed: {e}")
            raise TriageStageError(stage, e) from e
        except Exception as e:
            logger.error(f"❌ Stage '{stage}' failed: {e}", exc_info=True)
            raise TriageStageError(stage, e) from e

    async def process_incident(self, incident_id: str) -> TriageResult:
        """
        Run Scorer → Recommender → Allocator and persist the outcome.

        Raises:
            IncidentNotFoundError: incident does not exist
            TriageStageError: a stage failed; nothing was written
            RecordStoreError: the read or the consolidated write failed
        """
        logger.info(f"🤖 Starting multi-agent coordination for incident {incident_id}")

        incident = await self.store.get(INCIDENTS, incident_id)
        if incident is None:
            raise IncidentNotFoundError(incident_id)

        def prepare_priority_input():
            severity = Severity(incident.get("severity"))
            return PriorityInput(
                severity=severity,
                location_risk=estimate_location_risk(severity),
                age_hours=max(0.0, hours_since(incident["created_at"])),
                resource_availability=DEFAULT_RESOURCE_AVAILABILITY,
            )

        async def priority_stage():
            return await self.scorer.evaluate(prepare_priority_input())

        priority = await self._run_stage("priority", priority_stage)
        severity = Severity(incident["severity"])

        actions = await self._run_stage(
            "action",
            lambda: self.recommender.evaluate(ActionInput(severity=severity, priority=priority.priority)),
        )

        allocation = await self._run_stage(
            "resource",
            lambda: self.allocator.evaluate(
                AllocationInput(
                    priority=priority.priority,
                    required_types=required_resource_types(severity),
                )
            ),
        )

        now = utc_now()
        recommendations = [
            build_recommendation(AgentType.PRIORITY, priority.reasoning, now),
            build_recommendation(AgentType.ACTION, actions.reasoning, now),
            build_recommendation(AgentType.RESOURCE, allocation.reasoning, now),
        ]
        update = {
            "priority": priority.priority,
            "assigned_resources": [
                {
                    "id": r.resource_id,
                    "type": r.type.value,
                    "name": r.name,
                    "distance": r.distance,
                    "assigned_at": now,
                    "status": "assigned",
                }
                for r in allocation.resources
            ],
            "last_action_timestamp": now,
            "updated_at": now,
        }
        # Re-triaging an escalated incident must not walk its escalation state back
        if is_forward_transition(incident.get("escalation_status"), EscalationStatus.NORMAL.value):
            update["escalation_status"] = EscalationStatus.NORMAL.value
        await self.store.update(
            INCIDENTS, incident_id, update, appends={"ai_recommendations": recommendations}
        )

        reasoning = (
            f"Multi-agent analysis complete. Priority: {priority.priority}/10 "
            f"({priority.urgency_level.value}). Recommended {len(actions.actions)} actions "
            f"and allocated {len(allocation.resources)} resources."
        )
        logger.info(f"✅ {reasoning}")

        return TriageResult(
            incident_id=incident_id,
            priority=priority,
            actions=actions.actions,
            resources=allocation.resources,
            reasoning=reasoning,
        )

    async def process_delayed_incidents(self) -> List[str]:
        """
        Mark every delayed open incident as escalated.

        Returns the ids that should be dispatched: newly escalated incidents
        plus ones already escalated but not yet contacted. Incidents past
        escalation (auto_contacted) are left as they are.
        """
        logger.info("⏰ Checking for delayed incidents...")
        delayed = await self.monitor.evaluate(EscalationCheck(check_all=True))

        escalated_ids: List[str] = []
        for item in delayed:
            if not item.should_escalate:
                continue

            record = await self.store.get(INCIDENTS, item.incident_id)
            if record is None:
                logger.warning(f"Incident {item.incident_id} disappeared during escalation scan")
                continue

            current = record.get("escalation_status") or EscalationStatus.NORMAL.value
            if current == EscalationStatus.AUTO_CONTACTED.value:
                continue

            if current == EscalationStatus.NORMAL.value:
                now = utc_now()
                await self.store.update(INCIDENTS, item.incident_id, {
                    "escalation_status": EscalationStatus.ESCALATED.value,
                    "escalated_at": now,
                    "updated_at": now,
                })
                logger.info(
                    f"⚠️ Escalated incident {item.incident_id} ({item.hours_idle} hours delayed)"
                )

            escalated_ids.append(item.incident_id)

        return escalated_ids

    async def run_scheduled_escalation(self) -> EscalationRunSummary:
        """
        Scheduled entry point: escalate delayed incidents, then dispatch each.

        A failed dispatch is logged and recorded; it does not stop the batch.
        """
        escalated_ids = await self.process_delayed_incidents()
        summary = EscalationRunSummary(escalated_ids=escalated_ids)

        if not escalated_ids:
            logger.info("✅ No delayed incidents found")
            return summary

        logger.info(f"⚠️ Escalated {len(escalated_ids)} incidents")
        for incident_id in escalated_ids:
            try:
                result = await self.dispatcher.dispatch(incident_id)
            except TriageError as e:
                logger.error(f"❌ Failed to contact agents for {incident_id}: {e}")
                summary.dispatch_failures.append(incident_id)
                continue

            logger.info(
                f"📞 Incident {incident_id}: Contacted {result.contacted} agents, {result.failed} failed"
            )
            summary.dispatches.append(result)

        return summary


_orchestrator: Optional[TriageOrchestrator] = None


def get_triage_orchestrator() -> TriageOrchestrator:
    """
    Get or create TriageOrchestrator singleton instance.
    """
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = TriageOrchestrator()
    return _orchestrator
