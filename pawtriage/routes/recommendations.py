"""
Recommendation review endpoints - human decisions on agent output.

DESIGN PRINCIPLES (CRITICAL):
- Agent recommendations are append-only
- A reviewer decision is a NEW history entry, never an edit
- Overriding a recommendation requires a written reason
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from pawtriage.models.incident import RecommendationStatus
from pawtriage.services.recommendation_review import (
    RecommendationReviewService,
    get_recommendation_review_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/triage/incidents", tags=["Recommendations"])


class RecommendationDecisionRequest(BaseModel):
    """Request to approve, override or mark a recommendation executed."""
    status: RecommendationStatus = Field(..., description="approved, overridden or executed")
    reviewer_id: str = Field(..., min_length=1, description="Reviewer identifier")
    reason: Optional[str] = Field(None, max_length=1000, description="Required when overriding")


@router.post("/{incident_id}/recommendations/{recommendation_id}/status")
async def record_recommendation_decision(
    incident_id: str,
    recommendation_id: str,
    request: RecommendationDecisionRequest,
    service: RecommendationReviewService = Depends(get_recommendation_review_service),
):
    """
    Append a reviewer decision to a recommendation's history.

    **Rules:**
    - `pending` cannot be set; it is only the initial state
    - `overridden` needs a non-empty reason
    - Earlier entries are never changed
    """
    if request.status == RecommendationStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Status 'pending' cannot be recorded as a decision",
        )
    reason = (request.reason or "").strip()
    if request.status == RecommendationStatus.OVERRIDDEN and not reason:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A reason is required to override a recommendation",
        )

    entry = await service.record_decision(
        incident_id,
        recommendation_id,
        request.status,
        changed_by=request.reviewer_id,
        reason=reason,
    )
    return {
        "success": True,
        "incident_id": incident_id,
        "entry": entry,
    }


@router.get("/{incident_id}/recommendations/{recommendation_id}/history")
async def get_recommendation_history(
    incident_id: str,
    recommendation_id: str,
    service: RecommendationReviewService = Depends(get_recommendation_review_service),
):
    """Ordered status trail of one recommendation, oldest first."""
    history = await service.get_history(incident_id, recommendation_id)
    return {
        "incident_id": incident_id,
        "recommendation_id": recommendation_id,
        "current_status": history[-1]["status"],
        "history": history,
    }
