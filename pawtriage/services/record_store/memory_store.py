import copy
import logging
import operator
from typing import Any, Dict, List, Optional, Sequence

from pawtriage.core.exceptions import RecordStoreError
from .base import Filter, RecordStore

logger = logging.getLogger(__name__)

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda field_value, options: field_value in options,
    "not-in": lambda field_value, options: field_value not in options,
}


class InMemoryRecordStore(RecordStore):
    """
    Process-local record store used in mock DB mode and in tests.

    Mirrors the Firestore semantics the engine relies on: documents
    missing a filtered field never match, update() of a missing document
    fails, and results are returned as copies.
    """

    def __init__(self, seed: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for collection, docs in (seed or {}).items():
            for doc_id, data in docs.items():
                self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    @staticmethod
    def _matches(data: Dict[str, Any], filters: Sequence[Filter]) -> bool:
        for field_path, op_string, value in filters:
            if op_string not in _OPERATORS:
                raise RecordStoreError(f"Unsupported query operator: {op_string}")
            if field_path not in data:
                return False
            try:
                if not _OPERATORS[op_string](data[field_path], value):
                    return False
            except TypeError:
                return False
        return True

    async def get(self, collection, doc_id):
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        result = copy.deepcopy(data)
        result["id"] = doc_id
        return result

    async def query(self, collection, filters=(), limit=None, start_after=None):
        results = []
        for doc_id in sorted(self._collection(collection)):
            if start_after is not None and doc_id <= start_after:
                continue
            data = self._collection(collection)[doc_id]
            if not self._matches(data, filters):
                continue
            result = copy.deepcopy(data)
            result["id"] = doc_id
            results.append(result)
            if limit is not None and len(results) >= limit:
                break
        return results

    async def update(self, collection, doc_id, fields, appends=None):
        docs = self._collection(collection)
        if doc_id not in docs:
            raise RecordStoreError(f"No document to update: {collection}/{doc_id}")
        document = docs[doc_id]
        document.update(copy.deepcopy(fields))
        for field, values in (appends or {}).items():
            current = document.get(field)
            if not isinstance(current, list):
                current = []
            current.extend(copy.deepcopy(values))
            document[field] = current

    async def set(self, collection, doc_id, data):
        self._collection(collection)[doc_id] = copy.deepcopy(data)
