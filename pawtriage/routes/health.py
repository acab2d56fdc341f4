"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from pawtriage.core.exceptions import RecordStoreError
from pawtriage.core.settings import settings
from pawtriage.services.record_store import INCIDENTS, InMemoryRecordStore, RecordStore, get_record_store
from pawtriage.utils.time_helpers import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/db")
async def database_health(store: RecordStore = Depends(get_record_store)):
    """
    Record store connectivity check.
    Runs a one-document query against the incidents collection.
    """
    try:
        await store.query(INCIDENTS, limit=1)
    except RecordStoreError as e:
        logger.error(f"❌ Record store health check failed: {e}")
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}",
        )

    return {
        "status": "healthy",
        "database": "memory" if isinstance(store, InMemoryRecordStore) else "firestore",
        "connected": True,
        "timestamp": utc_now().isoformat(),
    }
