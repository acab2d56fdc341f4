"""
Pydantic models for incidents and the records attached to them.

DESIGN PRINCIPLE:
- The record store owns incidents; these models only describe their shape
- The triage engine reads incidents and writes partial updates
- Recommendation history is append-only
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List
from enum import Enum


class Severity(str, Enum):
    MINOR = "Minor"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class IncidentStatus(str, Enum):
    """
    Lifecycle status, driven by government users outside this engine.

    Only REPORTED and UNDER_REVIEW count as open for escalation.
    """
    REPORTED = "Reported"
    UNDER_REVIEW = "Under Review"
    ACTION_TAKEN = "Action Taken"
    RESOLVED = "Resolved"


OPEN_STATUSES = [IncidentStatus.REPORTED.value, IncidentStatus.UNDER_REVIEW.value]


class EscalationStatus(str, Enum):
    """
    Escalation state machine. Only moves forward:
    NORMAL → ESCALATED → AUTO_CONTACTED
    """
    NORMAL = "normal"
    ESCALATED = "escalated"
    AUTO_CONTACTED = "auto_contacted"


ESCALATION_ORDER = {
    EscalationStatus.NORMAL.value: 0,
    EscalationStatus.ESCALATED.value: 1,
    EscalationStatus.AUTO_CONTACTED.value: 2,
}


def is_forward_transition(current: Optional[str], target: str) -> bool:
    """True when moving from `current` to `target` never goes backward."""
    current_rank = ESCALATION_ORDER.get(current or EscalationStatus.NORMAL.value, 0)
    return ESCALATION_ORDER[target] >= current_rank


class AgentType(str, Enum):
    PRIORITY = "priority"
    ACTION = "action"
    RESOURCE = "resource"
    ESCALATION = "escalation"


class RecommendationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    OVERRIDDEN = "overridden"
    EXECUTED = "executed"


class ResourceType(str, Enum):
    RESCUE_TEAM = "rescue_team"
    VETERINARIAN = "veterinarian"
    ANIMAL_CONTROL = "animal_control"


class ContactMethod(str, Enum):
    SMS = "sms"
    EMAIL = "email"
    BOTH = "both"


class IncidentLocation(BaseModel):
    address: str = Field(default="", description="Human-readable address")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class RecommendationStatusEntry(BaseModel):
    """One timestamped status change of a recommendation."""
    status: RecommendationStatus
    changed_by: str = Field(default="system")
    reason: str = Field(default="")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Recommendation(BaseModel):
    """
    One agent's output attached to an incident.

    `status` mirrors the latest entry of `status_history`. Status changes
    append entries, they never rewrite earlier ones.
    """
    id: str
    agent_type: AgentType
    recommendation: str = Field(..., description="Rationale text produced by the agent")
    confidence: float = Field(..., ge=0.0, le=1.0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: RecommendationStatus = RecommendationStatus.PENDING
    status_history: List[RecommendationStatusEntry] = Field(default_factory=list)


class AssignedResource(BaseModel):
    id: str
    type: ResourceType
    name: str
    distance: str = Field(..., description="Distance estimate or unavailability marker")
    assigned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: str = Field(default="assigned")


class Incident(BaseModel):
    """A reported dog-related safety event, as stored in the incidents collection."""
    id: str
    severity: Severity
    location: IncidentLocation = Field(default_factory=IncidentLocation)
    created_at: datetime
    description: str = ""
    status: IncidentStatus = IncidentStatus.REPORTED
    priority: Optional[int] = Field(None, ge=1, le=10, description="Priority score (1-10)")
    escalation_status: EscalationStatus = EscalationStatus.NORMAL
    last_action_timestamp: Optional[datetime] = None
    escalated_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ai_recommendations: List[Recommendation] = Field(default_factory=list)
    assigned_resources: List[AssignedResource] = Field(default_factory=list)
    auto_contacted_agents: List[str] = Field(default_factory=list)

    class Config:
        extra = "ignore"


class Resource(BaseModel):
    """Allocatable responder asset. Read-only from the engine's point of view."""
    id: str
    type: ResourceType
    name: str
    availability: str = Field(default="available")

    class Config:
        extra = "ignore"


class ContactInfo(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    preferred_method: ContactMethod = ContactMethod.SMS


class Responder(BaseModel):
    """Government agent eligible to be notified of escalated incidents."""
    id: str
    name: str = ""
    availability: str = Field(default="off_duty")
    contact_info: ContactInfo = Field(default_factory=ContactInfo)

    class Config:
        extra = "ignore"

    @property
    def on_duty(self) -> bool:
        return self.availability == "on_duty"
