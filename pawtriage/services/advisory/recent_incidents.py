import logging
import math
from datetime import timedelta
from typing import Optional

from pawtriage.core.exceptions import RecordStoreError
from pawtriage.core.settings import settings
from pawtriage.services.record_store import INCIDENTS, RecordStore
from pawtriage.utils.time_helpers import utc_now

logger = logging.getLogger(__name__)

# Flat-earth approximation, good enough at neighbourhood scale
KM_PER_DEGREE = 111.0


def _coordinates(record) -> Optional[tuple]:
    location = record.get("location")
    if not isinstance(location, dict):
        return None
    lat = location.get("latitude")
    lng = location.get("longitude")
    if lat is None or lng is None:
        return None
    return float(lat), float(lng)


async def count_recent_incidents(
    store: RecordStore,
    lat: float,
    lng: float,
    radius_km: Optional[float] = None,
    hours_back: Optional[float] = None,
) -> int:
    """
    Count incidents reported within radius_km of (lat, lng) in the last hours_back hours.

    Advisory only: a store failure is logged and counts as zero.
    """
    radius_km = settings.RECENT_INCIDENT_RADIUS_KM if radius_km is None else radius_km
    hours_back = settings.RECENT_INCIDENT_HOURS if hours_back is None else hours_back
    cutoff = utc_now() - timedelta(hours=hours_back)

    try:
        records = await store.query(INCIDENTS, [("created_at", ">=", cutoff)])
    except RecordStoreError as e:
        logger.warning(f"⚠️ Recent incident count unavailable: {e}")
        return 0

    count = 0
    for record in records:
        coordinates = _coordinates(record)
        if coordinates is None:
            continue
        distance = math.hypot(lat - coordinates[0], lng - coordinates[1])
        if distance * KM_PER_DEGREE <= radius_km:
            count += 1
    return count
