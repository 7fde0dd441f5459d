#file: backend/utils.py

from datetime import datetime
import pytz
from typing import Optional


def get_current_time() -> datetime:
    """Get current UTC time as a timezone-aware datetime."""
    return datetime.now(pytz.utc)


def normalize_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    """Convert a datetime to naive UTC truncated to milliseconds, as MongoDB stores it.

    Naive input is taken to be UTC already.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(pytz.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive datetime read back from the database."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)
