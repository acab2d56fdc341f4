"""
Error taxonomy for the triage engine.

Routes translate these into HTTP status codes (see main.py).
Nothing in the engine retries on any of them; retry policy belongs
to whoever invoked the trigger.
"""

from typing import Optional


class TriageError(Exception):
    """Base class for all triage engine errors."""


class IncidentNotFoundError(TriageError):
    """Referenced incident does not exist in the record store."""

    def __init__(self, incident_id: str):
        self.incident_id = incident_id
        super().__init__(f"Incident {incident_id} not found")


class RecommendationNotFoundError(TriageError):
    """Referenced recommendation is not attached to the incident."""

    def __init__(self, incident_id: str, recommendation_id: str):
        self.incident_id = incident_id
        self.recommendation_id = recommendation_id
        super().__init__(
            f"Recommendation {recommendation_id} not found on incident {incident_id}"
        )


class RecordStoreError(TriageError):
    """Underlying record store read, query or update failed."""


class ResourceQueryError(RecordStoreError):
    """Resource pool query failed during allocation."""


class TriageStageError(TriageError):
    """
    A scoring, recommendation or allocation stage failed.

    The orchestration is aborted before any write happens.
    """

    def __init__(self, stage: str, cause: Optional[BaseException] = None):
        self.stage = stage
        self.cause = cause
        message = f"Triage stage '{stage}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
