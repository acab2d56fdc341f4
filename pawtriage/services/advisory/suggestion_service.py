"""
Advisory Suggestion Service - instant hints while a report is drafted.

DESIGN PRINCIPLES:
- Suggestions are ADVISORY and never persisted to an incident
- Every rule is independent; rule order does not matter
- Output is sorted critical > high > medium > low (stable otherwise)
- Results are cached by a digest of the risk features for a fixed TTL
"""

import hashlib
import logging
from typing import Callable, List, Optional

from pawtriage.core.settings import settings
from pawtriage.models.incident import Severity
from pawtriage.models.suggestion import (
    SUGGESTION_PRIORITY_RANK,
    AdvisorySuggestion,
    DogType,
    SuggestionAction,
    SuggestionDraft,
    SuggestionPriority,
    SuggestionResult,
    SuggestionType,
)
from pawtriage.utils.time_helpers import generate_id
from .cache import InMemorySuggestionCache, SuggestionCache

logger = logging.getLogger(__name__)

EMERGENCY_PHONE = "108"
HIGH_DENSITY_INCIDENT_COUNT = 3

Rule = Callable[[SuggestionDraft], Optional[AdvisorySuggestion]]


def build_cache_key(draft: SuggestionDraft) -> str:
    """
    Digest of the features the cache is keyed on.

    Location and dog type are deliberately outside the key.
    """
    severity = draft.severity.value if draft.severity else "none"
    features = (
        f"{severity}|{draft.rabies_concern}|{draft.repeat_offender}|"
        f"{draft.children_at_risk}|{draft.recent_incidents}"
    )
    return hashlib.sha256(features.encode()).hexdigest()[:16]


def _suggestion(type_: SuggestionType, **fields) -> AdvisorySuggestion:
    return AdvisorySuggestion(id=generate_id(type_.value), type=type_, **fields)


def severity_safety_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    if draft.severity == Severity.SEVERE:
        return _suggestion(
            SuggestionType.SAFETY,
            title="🚨 Severe Bite Detected - Immediate Action Required",
            message=(
                "Seek medical attention within 24 hours for rabies vaccine. "
                "Wash wound with soap and water for 15 minutes immediately."
            ),
            confidence=0.95,
            priority=SuggestionPriority.CRITICAL,
            actionable=True,
            action=SuggestionAction(label="Find Nearest Hospital", url="#emergency"),
        )
    if draft.severity == Severity.MODERATE:
        return _suggestion(
            SuggestionType.SAFETY,
            title="⚠️ Medical Attention Recommended",
            message=(
                "Consider visiting a doctor for wound assessment and tetanus shot if needed. "
                "Monitor for signs of infection."
            ),
            confidence=0.85,
            priority=SuggestionPriority.HIGH,
        )
    return None


def rabies_concern_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    if not draft.rabies_concern:
        return None
    return _suggestion(
        SuggestionType.PRIORITY,
        title="🔴 CRITICAL: Rabies Concern",
        message=(
            "This is a high-priority incident. Rabies is fatal if untreated. "
            "Immediate medical attention and animal control notification required."
        ),
        confidence=0.98,
        priority=SuggestionPriority.CRITICAL,
        actionable=True,
        action=SuggestionAction(label="Emergency Contacts", phone=EMERGENCY_PHONE),
    )


def children_at_risk_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    if not draft.children_at_risk:
        return None
    return _suggestion(
        SuggestionType.PRIORITY,
        title="👶 Children at Risk Alert",
        message=(
            "Incident near school/playground area. This will be escalated for "
            "immediate action to protect children in the vicinity."
        ),
        confidence=0.90,
        priority=SuggestionPriority.HIGH,
    )


def repeat_offender_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    if not draft.repeat_offender:
        return None
    return _suggestion(
        SuggestionType.PRIORITY,
        title="🔁 Repeat Offender Detected",
        message=(
            "This dog has been reported before. Animal control will be notified "
            "for immediate containment and assessment."
        ),
        confidence=0.88,
        priority=SuggestionPriority.HIGH,
    )


def nearby_incidents_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    count = draft.recent_incidents
    if count <= 0:
        return None
    word = "incident" if count == 1 else "incidents"
    return _suggestion(
        SuggestionType.SIMILAR,
        title=f"📊 {count} Recent {word.capitalize()} in Area",
        message=(
            f"{count} {word} reported in this area in the last 48 hours. "
            "This area may require increased monitoring."
        ),
        confidence=0.92,
        priority=SuggestionPriority.HIGH if count >= HIGH_DENSITY_INCIDENT_COUNT else SuggestionPriority.MEDIUM,
    )


def nearby_resources_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    if draft.location is None or draft.severity == Severity.MINOR:
        return None
    return _suggestion(
        SuggestionType.RESOURCE,
        title="🏥 Nearby Medical Resources",
        message=(
            "Hospitals with rabies vaccine availability have been identified near your "
            "location. Check the list below the form."
        ),
        confidence=0.85,
        priority=SuggestionPriority.MEDIUM,
    )


def missing_location_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    if draft.severity is None or draft.location is not None:
        return None
    return _suggestion(
        SuggestionType.GUIDANCE,
        title="💡 Tip: Add Location for Better Response",
        message=(
            "Detecting your location helps us find nearby hospitals and identify "
            "high-risk areas. Click the location button to auto-detect."
        ),
        confidence=0.75,
        priority=SuggestionPriority.LOW,
    )


def stray_dog_rule(draft: SuggestionDraft) -> Optional[AdvisorySuggestion]:
    if draft.dog_type != DogType.STRAY or draft.severity == Severity.MINOR:
        return None
    return _suggestion(
        SuggestionType.GUIDANCE,
        title="🐕 Stray Dog Protocol",
        message=(
            "Stray dog incidents are prioritized for animal control intervention. "
            "The dog will be located and assessed for rabies risk."
        ),
        confidence=0.80,
        priority=SuggestionPriority.MEDIUM,
    )


DEFAULT_RULES: List[Rule] = [
    severity_safety_rule,
    rabies_concern_rule,
    children_at_risk_rule,
    repeat_offender_rule,
    nearby_incidents_rule,
    nearby_resources_rule,
    missing_location_rule,
    stray_dog_rule,
]


def generate_suggestions(draft: SuggestionDraft, rules: List[Rule] = DEFAULT_RULES) -> List[AdvisorySuggestion]:
    suggestions = [s for s in (rule(draft) for rule in rules) if s is not None]
    # sorted() is stable, so equal priorities keep rule order
    return sorted(suggestions, key=lambda s: SUGGESTION_PRIORITY_RANK[s.priority])


class AdvisorySuggestionService:
    def __init__(self, cache: Optional[SuggestionCache] = None, rules: Optional[List[Rule]] = None):
        if cache is None:
            cache = InMemorySuggestionCache(ttl_seconds=settings.SUGGESTION_CACHE_TTL_SECONDS)
        self.cache = cache
        self.rules = rules if rules is not None else DEFAULT_RULES

    def suggest(self, draft: SuggestionDraft) -> SuggestionResult:
        key = build_cache_key(draft)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info("✅ Returning cached suggestions")
            return SuggestionResult(suggestions=cached, cached=True)

        self.cache.expire()
        suggestions = generate_suggestions(draft, self.rules)
        self.cache.set(key, suggestions)
        logger.info(f"✅ Generated {len(suggestions)} suggestions")
        return SuggestionResult(suggestions=suggestions, cached=False)


_suggestion_service: Optional[AdvisorySuggestionService] = None


def get_suggestion_service() -> AdvisorySuggestionService:
    """
    Get or create AdvisorySuggestionService singleton instance.
    """
    global _suggestion_service
    if _suggestion_service is None:
        _suggestion_service = AdvisorySuggestionService()
    return _suggestion_service
