"""
Resource Allocator - selects available responder assets for an incident.

Allocation here means "selected", not "reserved": no locking or
reservation protocol exists, so two incidents may be given the same
resource.
"""

from typing import List, Optional, Union
import logging

from pydantic import ValidationError

from pawtriage.core.exceptions import ResourceQueryError
from pawtriage.core.settings import settings
from pawtriage.models.incident import Resource, ResourceType, Severity
from pawtriage.models.triage import AllocatedResource, AllocationInput, AllocationResult
from pawtriage.services.record_store import RESOURCES, RecordStore, get_record_store
from .base import TriageAgent

logger = logging.getLogger(__name__)

# Distance is not computed; no geospatial routing exists behind this marker.
DISTANCE_UNAVAILABLE = "estimate unavailable"

REQUIRED_RESOURCE_TYPES = {
    Severity.SEVERE: [ResourceType.RESCUE_TEAM, ResourceType.VETERINARIAN, ResourceType.ANIMAL_CONTROL],
    Severity.MODERATE: [ResourceType.RESCUE_TEAM, ResourceType.ANIMAL_CONTROL],
    Severity.MINOR: [ResourceType.ANIMAL_CONTROL],
}


def required_resource_types(severity: Union[Severity, str]) -> List[ResourceType]:
    return list(REQUIRED_RESOURCE_TYPES[Severity(severity)])


class ResourceAllocator(TriageAgent[AllocationInput, AllocationResult]):
    """Picks up to MAX_ALLOCATED_RESOURCES available resources of the required types."""

    name = "resource"

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        query_limit: Optional[int] = None,
        max_allocated: Optional[int] = None,
    ):
        self.store = store or get_record_store()
        self.query_limit = query_limit or settings.RESOURCE_QUERY_LIMIT
        self.max_allocated = max_allocated or settings.MAX_ALLOCATED_RESOURCES

    async def _query_available(self, types: List[ResourceType]) -> List[Resource]:
        filters = [
            ("availability", "==", "available"),
            ("type", "in", [t.value for t in types]),
        ]
        try:
            records = await self.store.query(RESOURCES, filters, limit=self.query_limit)
        except Exception as e:
            raise ResourceQueryError(f"Resource pool query failed: {e}") from e

        resources = []
        for record in records:
            try:
                resources.append(Resource(**record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed resource record {record.get('id')}: {e}")
        return resources

    async def evaluate(self, request: AllocationInput) -> AllocationResult:
        available = await self._query_available(request.required_types)

        matching = [r for r in available if r.type in request.required_types]
        resources = [
            AllocatedResource(
                resource_id=r.id,
                type=r.type,
                name=r.name,
                distance=DISTANCE_UNAVAILABLE,
            )
            for r in matching[: self.max_allocated]
        ]

        reasoning = (
            f"Found {len(matching)} matching resources. "
            f"Allocated {len(resources)} based on availability "
            f"(distance {DISTANCE_UNAVAILABLE})."
        )
        logger.info(f"🚑 Resource Allocation: {reasoning}")

        return AllocationResult(resources=resources, reasoning=reasoning, matched_count=len(matching))
