"""
Action Recommender - rule table from severity and priority to actions.

Rules are evaluated top-down; the first matching branch wins.
"""

from typing import List, Union
import logging

from pawtriage.models.incident import Severity
from pawtriage.models.triage import (
    ActionInput,
    ActionPlan,
    ActionPriority,
    RecommendedAction,
)
from .base import TriageAgent

logger = logging.getLogger(__name__)

EMERGENCY_PRIORITY_THRESHOLD = 8
ASSESSMENT_PRIORITY_THRESHOLD = 5

EMERGENCY_ACTIONS = [
    ("Dispatch emergency rescue team immediately", ActionPriority.IMMEDIATE, "15-30 minutes"),
    ("Alert nearby veterinary hospitals with rabies vaccine availability", ActionPriority.IMMEDIATE, "5 minutes"),
    ("Notify local animal control for area containment", ActionPriority.URGENT, "30-60 minutes"),
]

ASSESSMENT_ACTIONS = [
    ("Assign field agent for assessment", ActionPriority.URGENT, "1-2 hours"),
    ("Check nearby shelter availability", ActionPriority.STANDARD, "30 minutes"),
]

ROUTINE_ACTIONS = [
    ("Schedule routine inspection", ActionPriority.STANDARD, "24-48 hours"),
]


def recommend_actions(severity: Union[Severity, str], priority: int) -> ActionPlan:
    severity = Severity(severity)

    if severity == Severity.SEVERE or priority >= EMERGENCY_PRIORITY_THRESHOLD:
        table = EMERGENCY_ACTIONS
    elif severity == Severity.MODERATE or priority >= ASSESSMENT_PRIORITY_THRESHOLD:
        table = ASSESSMENT_ACTIONS
    else:
        table = ROUTINE_ACTIONS

    actions: List[RecommendedAction] = [
        RecommendedAction(action=action, priority=tag, estimated_time=eta)
        for action, tag, eta in table
    ]

    immediate = any(a.priority == ActionPriority.IMMEDIATE for a in actions)
    reasoning = (
        f"Based on {severity.value} severity and priority {priority}/10, "
        f"recommended {len(actions)} actions. "
        f"Immediate response required: {'Yes' if immediate else 'No'}"
    )

    return ActionPlan(actions=actions, reasoning=reasoning)


class ActionRecommender(TriageAgent[ActionInput, ActionPlan]):
    name = "action"

    async def evaluate(self, request: ActionInput) -> ActionPlan:
        plan = recommend_actions(request.severity, request.priority)
        logger.info(f"📋 Action Recommendations: {plan.reasoning}")
        return plan
