"""
Timestamp helpers.

SQLite hands DateTime columns back without tzinfo even when a timezone-aware
value was written, so comparisons against "now" go through ensure_utc.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Attach UTC to a naive datetime; convert an aware one to UTC.

    Args:
        dt: Datetime read from the database or built by the caller

    Returns:
        Timezone-aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

