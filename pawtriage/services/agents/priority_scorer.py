"""
Priority Scorer - deterministic 1-10 priority calculation.

DESIGN PRINCIPLES:
- Priority is SYSTEM-DERIVED, NOT user-editable
- Same inputs always give the same score
- Score is always clamped to 1-10
"""

from typing import Union
import logging

from pawtriage.models.incident import Severity
from pawtriage.models.triage import PriorityInput, PriorityResult, UrgencyLevel
from .base import TriageAgent

logger = logging.getLogger(__name__)

MIN_PRIORITY = 1
MAX_PRIORITY = 10

# Configuration: Severity weights
SEVERITY_WEIGHTS = {
    Severity.SEVERE: 3,
    Severity.MODERATE: 2,
    Severity.MINOR: 1,
}

# Configuration: Time urgency steps, (age threshold in hours, contribution)
# checked from the oldest threshold down
TIME_URGENCY_STEPS = [
    (24, 4),
    (12, 3),
]
TIME_URGENCY_FRESH = 2
TIME_URGENCY_MAX = 4

# Configuration: Urgency label thresholds, checked top-down
URGENCY_THRESHOLDS = [
    (9, UrgencyLevel.CRITICAL),
    (7, UrgencyLevel.HIGH),
    (4, UrgencyLevel.MEDIUM),
]


def severity_weight(severity: Union[Severity, str]) -> int:
    return SEVERITY_WEIGHTS[Severity(severity)]


def calculate_time_urgency(age_hours: float) -> int:
    """Older incidents that are still unactioned contribute more, up to TIME_URGENCY_MAX."""
    for threshold, urgency in TIME_URGENCY_STEPS:
        if age_hours > threshold:
            return urgency
    return TIME_URGENCY_FRESH


def clamp_priority(score: int) -> int:
    return max(MIN_PRIORITY, min(MAX_PRIORITY, score))


def calculate_priority_score(
    severity: Union[Severity, str],
    location_risk: int,
    age_hours: float,
    resource_availability: int,
) -> int:
    score = (
        severity_weight(severity)
        + location_risk
        + calculate_time_urgency(age_hours)
        + resource_availability
    )
    return clamp_priority(score)


def classify_urgency(priority: int) -> UrgencyLevel:
    """
    Map a priority score onto an urgency label.

    9-10 critical, 7-8 high, 4-6 medium, 1-3 low.
    """
    for threshold, level in URGENCY_THRESHOLDS:
        if priority >= threshold:
            return level
    return UrgencyLevel.LOW


def score_priority(request: PriorityInput) -> PriorityResult:
    time_urgency = calculate_time_urgency(request.age_hours)
    priority = calculate_priority_score(
        request.severity,
        request.location_risk,
        request.age_hours,
        request.resource_availability,
    )
    urgency_level = classify_urgency(priority)

    reasoning = (
        f"Priority {priority}/10: {request.severity.value} severity "
        f"(weight: {severity_weight(request.severity)}), "
        f"location risk: {request.location_risk}/3, "
        f"time urgency: {time_urgency}/{TIME_URGENCY_MAX} ({round(request.age_hours)} hours old), "
        f"resource availability: {request.resource_availability}/3"
    )

    return PriorityResult(priority=priority, urgency_level=urgency_level, reasoning=reasoning)


class PriorityScorer(TriageAgent[PriorityInput, PriorityResult]):
    """Scores an incident from severity, location risk, age and resource availability."""

    name = "priority"

    async def evaluate(self, request: PriorityInput) -> PriorityResult:
        result = score_priority(request)
        logger.info(f"🎯 Priority Analysis: {result.reasoning}")
        return result
