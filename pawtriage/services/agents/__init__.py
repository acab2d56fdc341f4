"""
Rule-based triage agents.

None of these needs a learned model; each is a deterministic rule function
behind the shared TriageAgent.evaluate() interface.
"""

from .base import TriageAgent
from .priority_scorer import PriorityScorer, calculate_priority_score, classify_urgency
from .action_recommender import ActionRecommender, recommend_actions
from .resource_allocator import ResourceAllocator, required_resource_types
from .escalation_monitor import EscalationMonitor

__all__ = [
    "TriageAgent",
    "PriorityScorer",
    "ActionRecommender",
    "ResourceAllocator",
    "EscalationMonitor",
    "calculate_priority_score",
    "classify_urgency",
    "recommend_actions",
    "required_resource_types",
]
