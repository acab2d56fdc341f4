"""
Escalation Monitor - detects incidents that stalled without action.

DESIGN PRINCIPLES:
- The monitor only CLASSIFIES; it never writes and never contacts anyone
- Idle time runs from last_action_timestamp, falling back to created_at
- Re-scanning an already escalated incident is safe (it is re-selected
  until its lifecycle status changes)
"""

from datetime import datetime
from typing import Callable, List, Optional
import logging

from pawtriage.core.exceptions import IncidentNotFoundError
from pawtriage.core.settings import settings
from pawtriage.models.incident import OPEN_STATUSES
from pawtriage.models.triage import DelayedIncident, EscalationCheck
from pawtriage.services.record_store import INCIDENTS, RecordStore, get_record_store
from pawtriage.utils.time_helpers import hours_since, last_action_time, utc_now
from .base import TriageAgent

logger = logging.getLogger(__name__)


class EscalationMonitor(TriageAgent[EscalationCheck, List[DelayedIncident]]):
    """
    Flags open incidents idle for longer than ESCALATION_THRESHOLD_HOURS.

    Modes:
    1. Full scan over every Reported / Under Review incident
    2. Single incident check
    """

    name = "escalation"

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        threshold_hours: Optional[float] = None,
        page_size: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store or get_record_store()
        self.threshold_hours = threshold_hours if threshold_hours is not None else settings.ESCALATION_THRESHOLD_HOURS
        self.page_size = page_size or settings.SCAN_PAGE_SIZE
        self.clock = clock

    def classify(self, record: dict, now: Optional[datetime] = None) -> Optional[DelayedIncident]:
        """
        Idle classification for one stored incident.

        Returns None when the record carries neither timestamp.
        """
        started = last_action_time(record)
        if started is None:
            logger.warning(f"Incident {record.get('id')} has no timestamps, skipping idle check")
            return None

        idle = hours_since(started, now or self.clock())
        return DelayedIncident(
            incident_id=record["id"],
            hours_idle=round(idle),
            should_escalate=idle > self.threshold_hours,
        )

    async def scan_all(self) -> List[DelayedIncident]:
        now = self.clock()
        delayed: List[DelayedIncident] = []
        scanned = 0

        async for record in self.store.iterate(
            INCIDENTS, [("status", "in", OPEN_STATUSES)], page_size=self.page_size
        ):
            scanned += 1
            result = self.classify(record, now)
            if result is not None and result.should_escalate:
                delayed.append(result)

        logger.info(f"⏰ Escalation Check: scanned {scanned} open incidents, found {len(delayed)} delayed")
        return delayed

    async def check_incident(self, incident_id: str) -> Optional[DelayedIncident]:
        record = await self.store.get(INCIDENTS, incident_id)
        if record is None:
            raise IncidentNotFoundError(incident_id)
        return self.classify(record)

    async def evaluate(self, request: EscalationCheck) -> List[DelayedIncident]:
        if request.check_all:
            return await self.scan_all()

        if not request.incident_id:
            raise ValueError("incident_id is required when check_all is false")

        result = await self.check_incident(request.incident_id)
        if result is None or not result.should_escalate:
            return []
        return [result]
