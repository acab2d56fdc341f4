"""
Pydantic models for real-time advisory suggestions.
Suggestions are never persisted; they are served from a short-lived cache.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from pawtriage.models.incident import Severity


class SuggestionType(str, Enum):
    SAFETY = "safety"
    PRIORITY = "priority"
    RESOURCE = "resource"
    SIMILAR = "similar"
    GUIDANCE = "guidance"


class SuggestionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


SUGGESTION_PRIORITY_RANK = {
    SuggestionPriority.CRITICAL: 0,
    SuggestionPriority.HIGH: 1,
    SuggestionPriority.MEDIUM: 2,
    SuggestionPriority.LOW: 3,
}


class DogType(str, Enum):
    STRAY = "Stray"
    PET = "Pet"


class SuggestionAction(BaseModel):
    label: str
    url: Optional[str] = None
    phone: Optional[str] = None


class AdvisorySuggestion(BaseModel):
    id: str
    type: SuggestionType
    title: str
    message: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    priority: SuggestionPriority
    actionable: bool = False
    action: Optional[SuggestionAction] = None


class DraftLocation(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str = ""


class SuggestionDraft(BaseModel):
    """
    Partial form state of a report that is still being drafted.
    Every field is optional; the form may be almost empty.
    """
    severity: Optional[Severity] = None
    location: Optional[DraftLocation] = None
    dog_type: Optional[DogType] = None
    rabies_concern: bool = False
    repeat_offender: bool = False
    children_at_risk: bool = False
    recent_incidents: int = Field(default=0, ge=0)

    class Config:
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "severity": "Severe",
                "location": {"lat": 12.9716, "lng": 77.5946, "address": "MG Road"},
                "dog_type": "Stray",
                "rabies_concern": True,
                "repeat_offender": False,
                "children_at_risk": True,
            }
        }


class SuggestionResult(BaseModel):
    suggestions: List[AdvisorySuggestion] = Field(default_factory=list)
    cached: bool = False
