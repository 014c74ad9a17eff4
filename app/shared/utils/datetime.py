"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system are timezone-aware UTC. Expiry checks
(role assignments, permission overrides) compare against utc_now().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone (SQLite returns naive values)
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    """Return True when expires_at is set and not in the future."""
    if expires_at is None:
        return False
    reference = now or utc_now()
    return ensure_utc(expires_at) <= ensure_utc(reference)
