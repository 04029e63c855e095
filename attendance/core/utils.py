"""General utility functions."""
from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_timezone(dt: datetime, tz: ZoneInfo) -> datetime:
    """Convert datetime to specified timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def format_local(dt: datetime, tz: ZoneInfo) -> str:
    """Human-readable local time, e.g. ``2025-03-04 09:15:02``."""
    return to_timezone(dt, tz).strftime("%Y-%m-%d %H:%M:%S")


def seconds_remaining(expires_at: Optional[datetime], now: datetime) -> int:
    """
    Whole seconds left before ``expires_at`` for the countdown display.

    Display only: the authoritative expiry check happens during verification.
    Returns 0 when no code has been issued or the code already expired.
    """
    if expires_at is None:
        return 0
    delta = (to_utc(expires_at) - to_utc(now)).total_seconds()
    return max(0, int(delta))
