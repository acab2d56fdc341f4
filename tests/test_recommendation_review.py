"""
Tests for reviewer decisions on agent recommendations.
"""

import pytest

from pawtriage.core.exceptions import IncidentNotFoundError, RecommendationNotFoundError
from pawtriage.models.incident import AgentType, RecommendationStatus
from pawtriage.services.recommendation_review import RecommendationReviewService
from pawtriage.services.triage_orchestrator import build_recommendation
from pawtriage.utils.time_helpers import utc_now


@pytest.fixture
def reviewed_store(build_store, make_incident):
    recommendation = build_recommendation(AgentType.PRIORITY, "Priority 10/10", utc_now())
    recommendation["id"] = "rec-1"
    store = build_store(incidents={"inc-1": make_incident(ai_recommendations=[recommendation])})
    return store


class TestRecordDecision:
    @pytest.mark.asyncio
    async def test_decisions_are_appended(self, reviewed_store):
        service = RecommendationReviewService(store=reviewed_store)
        before = await reviewed_store.get("incidents", "inc-1")

        await service.record_decision("inc-1", "rec-1", RecommendationStatus.APPROVED, changed_by="officer-7")
        await service.record_decision(
            "inc-1", "rec-1", RecommendationStatus.OVERRIDDEN, changed_by="officer-9", reason="Team already on site"
        )

        history = await service.get_history("inc-1", "rec-1")
        assert [h["status"] for h in history] == ["pending", "approved", "overridden"]
        assert history[2]["reason"] == "Team already on site"
        assert await service.current_status("inc-1", "rec-1") == "overridden"

        stored = await reviewed_store.get("incidents", "inc-1")
        # the recommendation itself is never edited
        assert stored["ai_recommendations"] == before["ai_recommendations"]
        assert len(stored["recommendation_audit"]) == 2
        assert stored["last_action_timestamp"] is not None

    @pytest.mark.asyncio
    async def test_pending_is_not_a_decision(self, reviewed_store):
        service = RecommendationReviewService(store=reviewed_store)
        with pytest.raises(ValueError):
            await service.record_decision("inc-1", "rec-1", RecommendationStatus.PENDING, changed_by="officer-7")

    @pytest.mark.asyncio
    async def test_unknown_recommendation(self, reviewed_store):
        service = RecommendationReviewService(store=reviewed_store)
        with pytest.raises(RecommendationNotFoundError):
            await service.record_decision("inc-1", "rec-404", "approved", changed_by="officer-7")

    @pytest.mark.asyncio
    async def test_unknown_incident(self, reviewed_store):
        service = RecommendationReviewService(store=reviewed_store)
        with pytest.raises(IncidentNotFoundError):
            await service.get_history("inc-404", "rec-1")
