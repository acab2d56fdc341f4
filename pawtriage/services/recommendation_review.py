"""
Recommendation Review - human decisions on agent recommendations.

DESIGN PRINCIPLES:
- Recommendations are append-only once created
- A decision (approve / override / execute) is a NEW audit entry,
  never an edit of the recommendation or of earlier entries
- The current status of a recommendation is its latest entry
- No validation blocks an override; requiring a reason is the
  caller's job
"""

import logging
from typing import Dict, List, Optional

from pawtriage.core.exceptions import IncidentNotFoundError, RecommendationNotFoundError
from pawtriage.models.incident import RecommendationStatus
from pawtriage.services.record_store import INCIDENTS, RecordStore, get_record_store
from pawtriage.utils.time_helpers import to_datetime, utc_now

logger = logging.getLogger(__name__)

AUDIT_FIELD = "recommendation_audit"

DECISION_STATUSES = [
    RecommendationStatus.APPROVED,
    RecommendationStatus.OVERRIDDEN,
    RecommendationStatus.EXECUTED,
]


class RecommendationReviewService:
    def __init__(self, store: Optional[RecordStore] = None):
        self.store = store or get_record_store()

    async def _load(self, incident_id: str, recommendation_id: str):
        incident = await self.store.get(INCIDENTS, incident_id)
        if incident is None:
            raise IncidentNotFoundError(incident_id)

        for recommendation in incident.get("ai_recommendations") or []:
            if recommendation.get("id") == recommendation_id:
                return incident, recommendation
        raise RecommendationNotFoundError(incident_id, recommendation_id)

    async def record_decision(
        self,
        incident_id: str,
        recommendation_id: str,
        status: RecommendationStatus,
        changed_by: str,
        reason: str = "",
    ) -> Dict:
        """
        Append one status entry for a recommendation.

        Raises:
            IncidentNotFoundError / RecommendationNotFoundError
            ValueError: status is not a decision (pending is only ever initial)
        """
        status = RecommendationStatus(status)
        if status not in DECISION_STATUSES:
            raise ValueError(f"'{status.value}' is not a reviewable decision")

        await self._load(incident_id, recommendation_id)

        now = utc_now()
        entry = {
            "recommendation_id": recommendation_id,
            "status": status.value,
            "changed_by": changed_by,
            "reason": reason or "",
            "timestamp": now,
        }
        await self.store.update(
            INCIDENTS,
            incident_id,
            {"last_action_timestamp": now, "updated_at": now},
            appends={AUDIT_FIELD: [entry]},
        )

        logger.info(
            f"Recommendation {recommendation_id} on incident {incident_id} marked "
            f"{status.value} by {changed_by}"
        )
        return entry

    async def get_history(self, incident_id: str, recommendation_id: str) -> List[Dict]:
        """Full ordered trail: the creation entries, then every appended decision."""
        incident, recommendation = await self._load(incident_id, recommendation_id)

        history = list(recommendation.get("status_history") or [])
        if not history:
            history = [{
                "status": recommendation.get("status", RecommendationStatus.PENDING.value),
                "changed_by": "system",
                "reason": "",
                "timestamp": recommendation.get("timestamp"),
            }]

        decisions = [
            entry for entry in incident.get(AUDIT_FIELD) or []
            if entry.get("recommendation_id") == recommendation_id
        ]
        decisions.sort(key=lambda entry: to_datetime(entry["timestamp"]))
        return history + decisions

    async def current_status(self, incident_id: str, recommendation_id: str) -> str:
        history = await self.get_history(incident_id, recommendation_id)
        return history[-1]["status"]


_review_service: Optional[RecommendationReviewService] = None


def get_recommendation_review_service() -> RecommendationReviewService:
    global _review_service
    if _review_service is None:
        _review_service = RecommendationReviewService()
    return _review_service
