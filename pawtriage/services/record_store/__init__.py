"""
Record store access for the triage engine.

The engine never talks to Firestore directly; it goes through the
RecordStore contract so the backend can be swapped (mock DB mode, tests).
"""

import logging
from typing import Optional

from pawtriage.core.settings import settings
from .base import INCIDENTS, RESOURCES, RESPONDERS, Filter, RecordStore
from .memory_store import InMemoryRecordStore

logger = logging.getLogger(__name__)

_store_instance: Optional[RecordStore] = None


def get_record_store() -> RecordStore:
    """
    Resolve the active record store based on settings.

    - USE_MOCK_DB=true → in-memory store (nothing persisted)
    - otherwise → Firestore via firebase_admin
    """
    global _store_instance
    if _store_instance is not None:
        return _store_instance

    if settings.USE_MOCK_DB:
        _store_instance = InMemoryRecordStore()
        logger.info("[STORE] USING IN-MEMORY RECORD STORE")
    else:
        from .firestore_store import FirestoreRecordStore

        _store_instance = FirestoreRecordStore()
        logger.info("[STORE] USING FIRESTORE RECORD STORE")
    return _store_instance


def set_record_store(store: Optional[RecordStore]) -> None:
    """Override the active store (tests, scripts)."""
    global _store_instance
    _store_instance = store


__all__ = [
    "INCIDENTS",
    "RESOURCES",
    "RESPONDERS",
    "Filter",
    "RecordStore",
    "InMemoryRecordStore",
    "get_record_store",
    "set_record_store",
]
