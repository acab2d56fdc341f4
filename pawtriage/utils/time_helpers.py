"""
Time and identifier helpers shared by the triage agents.
"""

from datetime import datetime, timezone
from typing import Optional, Union
import time
import uuid


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_datetime(value: Union[datetime, str, None]) -> Optional[datetime]:
    """
    Normalize a stored timestamp into an aware UTC datetime.

    Firestore returns DatetimeWithNanoseconds (a datetime subclass), the mock
    store and JSON payloads may carry ISO strings. Naive values are treated
    as UTC.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def hours_since(moment: Union[datetime, str], now: Optional[datetime] = None) -> float:
    """Fractional hours elapsed between `moment` and `now`."""
    moment = to_datetime(moment)
    now = to_datetime(now) if now is not None else utc_now()
    return (now - moment).total_seconds() / 3600


def last_action_time(record: dict) -> Optional[datetime]:
    """Idle clock start: last action, or creation time if never actioned."""
    return to_datetime(record.get("last_action_timestamp") or record.get("created_at"))


def generate_id(prefix: str) -> str:
    """Unique, prefix-tagged id, e.g. `priority_1718000000000_3f9a1c2b7`."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
