"""
Time utilities.

Calendar days for the daily cap are taken in the configured timezone
(``EngineConfig.daily_cap.timezone``, default ``Africa/Lagos`` / GMT+1).
Timestamps stamped on predictions are UTC.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def local_date(moment: datetime, tz_name: str) -> date:
    """Calendar date of ``moment`` in ``tz_name``.  ``moment`` must be aware."""
    return moment.astimezone(ZoneInfo(tz_name)).date()


def parse_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If ``value`` is not a valid ISO date.
    """
    return date.fromisoformat(value.strip())
