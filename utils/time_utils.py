"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Naive UTC timestamps (as stored by MongoDB)
- Session expiry checks
- Display formatting
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Current UTC time without tzinfo, truncated to milliseconds like BSON dates.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def is_session_expired(last_interaction: Optional[datetime], timeout_minutes: int = 30) -> bool:
    """
    Checks if a session has expired based on last interaction time.
    """
    if not last_interaction:
        return True

    expiry_time = last_interaction + timedelta(minutes=timeout_minutes)
    return utc_now() > expiry_time


def expires_at(hours: int) -> datetime:
    """
    Expiry timestamp for a document idle from now on.
    """
    return utc_now() + timedelta(hours=hours)


def format_timestamp(dt: Optional[datetime], format_str: str = "%d.%m.%Y, %H:%M") -> str:
    """
    Formats a datetime object to string.
    """
    if not dt:
        return "N/A"
    return dt.strftime(format_str)
