"""
Triage endpoints - HTTP triggers for the triage engine.

DESIGN PRINCIPLES:
- Routes only translate HTTP; all engine logic lives in services
- Engine errors propagate to the handlers registered in main.py
- Nothing here retries; the caller (scheduler, admin UI) decides
"""

import logging

from fastapi import APIRouter, Depends

from pawtriage.models.base import BaseResponse
from pawtriage.models.triage import DispatchResult, EscalationRunSummary, TriageResult
from pawtriage.services.contact_dispatcher import ContactDispatcher, get_contact_dispatcher
from pawtriage.services.triage_orchestrator import TriageOrchestrator, get_triage_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/triage", tags=["Triage"])


class ContactResponse(BaseResponse):
    incident_id: str
    contacted: int
    failed: int
    no_responders: bool = False


@router.post("/incidents/{incident_id}/process", response_model=TriageResult)
async def process_incident(
    incident_id: str,
    orchestrator: TriageOrchestrator = Depends(get_triage_orchestrator),
):
    """
    Score, plan and resource one incident, then persist the outcome.

    Fired when an incident is created, or manually to re-triage.
    """
    return await orchestrator.process_incident(incident_id)


@router.post("/incidents/{incident_id}/contact", response_model=ContactResponse)
async def contact_responders(
    incident_id: str,
    dispatcher: ContactDispatcher = Depends(get_contact_dispatcher),
):
    """
    Manually notify on-duty responders about one incident.

    Returns how many responders were reached and how many were not.
    """
    result: DispatchResult = await dispatcher.dispatch(incident_id)
    message = "No on-duty responders found" if result.no_responders else None
    return ContactResponse(
        message=message,
        incident_id=incident_id,
        contacted=result.contacted,
        failed=result.failed,
        no_responders=result.no_responders,
    )


@router.post("/escalations/run", response_model=EscalationRunSummary)
async def run_escalations(
    orchestrator: TriageOrchestrator = Depends(get_triage_orchestrator),
):
    """
    Scheduled entry point: escalate delayed incidents and dispatch alerts.

    Meant to be hit by an hourly scheduler; scripts/run_escalation_scan.py
    does the same from the command line.
    """
    summary = await orchestrator.run_scheduled_escalation()
    logger.info(
        f"⏰ Escalation run complete: {len(summary.escalated_ids)} escalated, "
        f"{len(summary.dispatch_failures)} dispatch failures"
    )
    return summary
