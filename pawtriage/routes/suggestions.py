"""
Advisory suggestion endpoint.

Suggestions are ADVISORY hints shown while a citizen drafts a report.
They never modify an incident and a failure here never blocks reporting.
"""

import logging
import time
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from pawtriage.models.suggestion import AdvisorySuggestion, SuggestionDraft
from pawtriage.services.advisory import (
    AdvisorySuggestionService,
    count_recent_incidents,
    get_suggestion_service,
)
from pawtriage.services.record_store import RecordStore, get_record_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suggestions", tags=["Suggestions"])


class SuggestionResponse(BaseModel):
    suggestions: List[AdvisorySuggestion]
    cached: bool
    processing_time_ms: int


@router.post("", response_model=SuggestionResponse)
async def get_suggestions(
    draft: SuggestionDraft,
    service: AdvisorySuggestionService = Depends(get_suggestion_service),
    store: RecordStore = Depends(get_record_store),
):
    """
    Real-time suggestions for a draft report.

    When coordinates are supplied and the client did not send a count,
    the nearby incident count is looked up before the rules run.
    """
    started = time.perf_counter()

    if draft.location is not None and draft.recent_incidents == 0:
        recent = await count_recent_incidents(store, draft.location.lat, draft.location.lng)
        draft = draft.model_copy(update={"recent_incidents": recent})

    result = service.suggest(draft)
    processing_time_ms = int((time.perf_counter() - started) * 1000)

    logger.info(
        f"💡 Served {len(result.suggestions)} suggestions in {processing_time_ms}ms "
        f"(cached={result.cached})"
    )
    return SuggestionResponse(
        suggestions=result.suggestions,
        cached=result.cached,
        processing_time_ms=processing_time_ms,
    )
