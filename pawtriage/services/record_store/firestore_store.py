import asyncio
import logging
from functools import partial
from typing import Any, Dict, List, Optional, Sequence

from firebase_admin import firestore

from pawtriage.config.firebase import get_db
from pawtriage.core.exceptions import RecordStoreError
from pawtriage.utils.firestore_helpers import apply_filters
from .base import Filter, RecordStore

logger = logging.getLogger(__name__)


class FirestoreRecordStore(RecordStore):
    """
    Record store backed by the firebase_admin Firestore client.

    The client is synchronous; every call runs in the default thread pool
    so the event loop only suspends on the I/O wait.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def db(self):
        if self._client is None:
            try:
                self._client = get_db()
            except RuntimeError as e:
                raise RecordStoreError(str(e)) from e
        return self._client

    async def _run(self, func, *args):
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args))
        except RecordStoreError:
            raise
        except Exception as e:
            logger.error(f"Firestore operation {func.__name__} failed: {e}", exc_info=True)
            raise RecordStoreError(f"Firestore operation failed: {e}") from e

    def _get_sync(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self.db.collection(collection).document(doc_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        data["id"] = doc.id
        return data

    def _query_sync(
        self,
        collection: str,
        filters: Sequence[Filter],
        limit: Optional[int],
        start_after: Optional[str],
    ) -> List[Dict[str, Any]]:
        collection_ref = self.db.collection(collection)
        query = apply_filters(collection_ref, filters)

        if limit is not None or start_after is not None:
            query = query.order_by("__name__")
        if start_after is not None:
            cursor = collection_ref.document(start_after).get()
            if cursor.exists:
                query = query.start_after(cursor)
        if limit is not None:
            query = query.limit(limit)

        results = []
        for doc in query.stream():
            data = doc.to_dict()
            data["id"] = doc.id
            results.append(data)
        return results

    def _update_sync(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        appends: Optional[Dict[str, List[Any]]],
    ) -> None:
        payload = dict(fields)
        for field, values in (appends or {}).items():
            payload[field] = firestore.ArrayUnion(values)
        self.db.collection(collection).document(doc_id).update(payload)

    def _set_sync(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.db.collection(collection).document(doc_id).set(data)

    async def get(self, collection, doc_id):
        return await self._run(self._get_sync, collection, doc_id)

    async def query(self, collection, filters=(), limit=None, start_after=None):
        return await self._run(self._query_sync, collection, list(filters), limit, start_after)

    async def update(self, collection, doc_id, fields, appends=None):
        await self._run(self._update_sync, collection, doc_id, fields, appends)

    async def set(self, collection, doc_id, data):
        await self._run(self._set_sync, collection, doc_id, data)
