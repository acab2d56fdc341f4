"""
Pydantic models for triage agent inputs and outputs.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from pawtriage.models.incident import Severity, ResourceType


class UrgencyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ActionPriority(str, Enum):
    IMMEDIATE = "immediate"
    URGENT = "urgent"
    STANDARD = "standard"


class PriorityInput(BaseModel):
    severity: Severity
    location_risk: int = Field(..., ge=0, le=3, description="Location risk estimate (0-3)")
    age_hours: float = Field(..., ge=0, description="Hours since the incident was created")
    resource_availability: int = Field(..., ge=0, le=3, description="Resource availability estimate (0-3)")


class PriorityResult(BaseModel):
    priority: int = Field(..., ge=1, le=10)
    urgency_level: UrgencyLevel
    reasoning: str


class ActionInput(BaseModel):
    severity: Severity
    priority: int = Field(..., ge=1, le=10)


class RecommendedAction(BaseModel):
    action: str
    priority: ActionPriority
    estimated_time: str


class ActionPlan(BaseModel):
    actions: List[RecommendedAction]
    reasoning: str

    @property
    def requires_immediate_response(self) -> bool:
        return any(a.priority == ActionPriority.IMMEDIATE for a in self.actions)


class AllocationInput(BaseModel):
    priority: int = Field(..., ge=1, le=10)
    required_types: List[ResourceType] = Field(..., min_length=1)


class AllocatedResource(BaseModel):
    resource_id: str
    type: ResourceType
    name: str
    distance: str


class AllocationResult(BaseModel):
    resources: List[AllocatedResource]
    reasoning: str
    matched_count: int = 0


class EscalationCheck(BaseModel):
    check_all: bool = True
    incident_id: Optional[str] = None


class DelayedIncident(BaseModel):
    incident_id: str
    hours_idle: float
    should_escalate: bool


class DispatchResult(BaseModel):
    incident_id: str
    contacted: int = 0
    failed: int = 0
    contacted_agent_ids: List[str] = Field(default_factory=list)
    no_responders: bool = False


class TriageResult(BaseModel):
    incident_id: str
    priority: PriorityResult
    actions: List[RecommendedAction]
    resources: List[AllocatedResource]
    reasoning: str


class EscalationRunSummary(BaseModel):
    escalated_ids: List[str] = Field(default_factory=list)
    dispatches: List[DispatchResult] = Field(default_factory=list)
    dispatch_failures: List[str] = Field(default_factory=list)
