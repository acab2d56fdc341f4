"""
Suggestion cache abstraction.

Advisory content is non-authoritative: a few minutes of staleness is
accepted, entries are never invalidated early, and concurrent writers
resolve as last write wins. Expiry is checked by timestamp at read time.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple
import logging
import time

from pawtriage.models.suggestion import AdvisorySuggestion

logger = logging.getLogger(__name__)


class SuggestionCache(ABC):
    """
    Contract for suggestion caches.

    A process-local implementation is enough for a single instance; a
    multi-instance deployment can swap in a shared backend.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[List[AdvisorySuggestion]]:
        """Cached suggestions for `key`, or None if missing or expired."""
        pass

    @abstractmethod
    def set(self, key: str, suggestions: List[AdvisorySuggestion]) -> None:
        pass

    @abstractmethod
    def expire(self) -> int:
        """Drop expired entries; returns how many were removed."""
        pass


class InMemorySuggestionCache(SuggestionCache):
    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[float, List[AdvisorySuggestion]]] = {}

    def _is_fresh(self, stored_at: float) -> bool:
        return self.clock() - stored_at < self.ttl_seconds

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, suggestions = entry
        if not self._is_fresh(stored_at):
            return None
        return list(suggestions)

    def set(self, key, suggestions):
        self._entries[key] = (self.clock(), list(suggestions))

    def expire(self):
        stale = [key for key, (stored_at, _) in list(self._entries.items()) if not self._is_fresh(stored_at)]
        for key in stale:
            self._entries.pop(key, None)
        if stale:
            logger.debug(f"Expired {len(stale)} cached suggestion sets")
        return len(stale)

    def __len__(self):
        return len(self._entries)
