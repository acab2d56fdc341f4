"""
Triage Agent Base Interface.

Every rule-based agent (priority, action, resource, escalation) implements
this contract so the orchestrator can compose them without any framework.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar
import logging

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class TriageAgent(ABC, Generic[InputT, OutputT]):
    """
    Abstract base class for triage agents.

    evaluate() MUST:
    - Be deterministic for a given input and store state
    - Raise on failure (the orchestrator turns that into a stage error)
    - Never write to the record store
    """

    name: str = "agent"

    @abstractmethod
    async def evaluate(self, request: InputT) -> OutputT:
        """
        Run the agent on one input.

        Pure agents never suspend; agents that read the record store
        suspend only on those reads.
        """
        pass
