"""Datetime helpers"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize an incoming datetime to naive UTC.

    Args:
        value: Aware or naive datetime (naive values are assumed to be UTC)

    Returns:
        Naive UTC datetime, or None
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def isoformat_or_empty(value: Optional[datetime]) -> str:
    """ISO-8601 string for a datetime, empty string for None"""
    return value.isoformat() if value else ""
