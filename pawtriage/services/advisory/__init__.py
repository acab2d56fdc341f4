"""
Real-time advisory suggestions for reports that are still being drafted.
"""

from .cache import InMemorySuggestionCache, SuggestionCache
from .suggestion_service import (
    AdvisorySuggestionService,
    build_cache_key,
    get_suggestion_service,
)
from .recent_incidents import count_recent_incidents

__all__ = [
    "AdvisorySuggestionService",
    "InMemorySuggestionCache",
    "SuggestionCache",
    "build_cache_key",
    "count_recent_incidents",
    "get_suggestion_service",
]
