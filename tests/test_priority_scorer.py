"""
Tests for the priority scorer.
"""

import pytest

from pawtriage.models.incident import Severity
from pawtriage.models.triage import PriorityInput, UrgencyLevel
from pawtriage.services.agents import PriorityScorer, calculate_priority_score, classify_urgency
from pawtriage.services.agents.priority_scorer import calculate_time_urgency, clamp_priority


class TestUrgencyClassification:
    """Boundary table for priority → urgency label."""

    @pytest.mark.parametrize(
        "priority,expected",
        [
            (10, UrgencyLevel.CRITICAL),
            (9, UrgencyLevel.CRITICAL),
            (8, UrgencyLevel.HIGH),
            (7, UrgencyLevel.HIGH),
            (6, UrgencyLevel.MEDIUM),
            (4, UrgencyLevel.MEDIUM),
            (3, UrgencyLevel.LOW),
            (1, UrgencyLevel.LOW),
        ],
    )
    def test_boundaries(self, priority, expected):
        assert classify_urgency(priority) == expected


class TestTimeUrgency:
    def test_fresh_incident(self):
        assert calculate_time_urgency(0) == 2
        assert calculate_time_urgency(12) == 2

    def test_half_day_old(self):
        assert calculate_time_urgency(12.5) == 3
        assert calculate_time_urgency(24) == 3

    def test_older_than_a_day_caps(self):
        assert calculate_time_urgency(24.1) == 4
        assert calculate_time_urgency(500) == 4


class TestPriorityScore:
    def test_severe_fresh_incident_scores_ten(self):
        """Severe, just created, location risk 3, availability 2."""
        assert calculate_priority_score(Severity.SEVERE, 3, 0, 2) == 10

    def test_score_is_clamped_high(self):
        assert calculate_priority_score(Severity.SEVERE, 3, 48, 3) == 10

    def test_score_is_clamped_low(self):
        assert clamp_priority(-5) == 1
        assert clamp_priority(0) == 1
        assert clamp_priority(42) == 10

    def test_minor_fresh_incident(self):
        # 1 + 0 + 2 + 0
        assert calculate_priority_score(Severity.MINOR, 0, 1, 0) == 3

    def test_accepts_severity_strings(self):
        assert calculate_priority_score("Moderate", 2, 0, 2) == 8

    def test_deterministic(self):
        scores = {calculate_priority_score(Severity.MODERATE, 1, 13, 1) for _ in range(5)}
        assert scores == {7}

    def test_unknown_severity_raises(self):
        with pytest.raises(ValueError):
            calculate_priority_score("Catastrophic", 1, 0, 1)


class TestPriorityScorerAgent:
    @pytest.mark.asyncio
    async def test_evaluate_returns_reasoning(self):
        scorer = PriorityScorer()
        result = await scorer.evaluate(
            PriorityInput(severity=Severity.SEVERE, location_risk=3, age_hours=0, resource_availability=2)
        )
        assert result.priority == 10
        assert result.urgency_level == UrgencyLevel.CRITICAL
        assert "Severe severity" in result.reasoning
        assert "location risk: 3/3" in result.reasoning

    def test_input_rejects_out_of_range_risk(self):
        with pytest.raises(ValueError):
            PriorityInput(severity=Severity.MINOR, location_risk=4, age_hours=0, resource_availability=0)
