from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)

# (field_path, op_string, value), same shape as a Firestore where() call
Filter = Tuple[str, str, Any]

INCIDENTS = "incidents"
RESPONDERS = "governmentAgents"
RESOURCES = "governmentResources"


class RecordStore(ABC):
    """
    Keyed document store consumed by the triage engine.

    Contract:
    - Documents are plain dicts; reads include the document id under "id".
    - get() returns None for a missing document.
    - query() supports ==, !=, in, <, <=, >, >= filters, an optional limit,
      and cursor pagination via `start_after` (a document id, results
      ordered by id).
    - update() merges top-level fields into an existing document; `appends`
      adds values to list fields in the same write.
    - append() adds values to a list field without reading the document
      first (atomic array append).
    - Failures surface as RecordStoreError; nothing here retries.
    - There is no locking or versioning: concurrent writers to the same
      document resolve as last write wins.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        limit: Optional[int] = None,
        start_after: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        appends: Optional[Dict[str, List[Any]]] = None,
    ) -> None:
        raise NotImplementedError

    async def append(self, collection: str, doc_id: str, field: str, values: List[Any]) -> None:
        await self.update(collection, doc_id, {}, appends={field: values})

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def iterate(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        page_size: int = 200,
    ):
        """Yield every matching document, one page at a time."""
        cursor = None
        while True:
            page = await self.query(collection, filters, limit=page_size, start_after=cursor)
            for record in page:
                yield record
            if len(page) < page_size:
                return
            cursor = page[-1]["id"]
