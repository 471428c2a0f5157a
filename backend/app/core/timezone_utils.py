"""
Timezone utilities for the CoachPlanner platform.

All timestamps are stored in UTC. Calendar notions such as "today" or
"this month" are evaluated in the organization's timezone.
"""

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Optional, Tuple

import pytz

if TYPE_CHECKING:
    from app.models.organization import Organization


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.UTC)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    SQLite hands back naive datetimes even for ``DateTime(timezone=True)``
    columns; those are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def get_org_timezone(org: "Organization") -> pytz.BaseTzInfo:
    """
    Get the organization's timezone.

    Args:
        org: Organization (always has a timezone field)

    Returns:
        Organization timezone as pytz timezone object
    """
    return pytz.timezone(org.timezone or "UTC")


def local_midnight_utc(tz: pytz.BaseTzInfo, day: date) -> datetime:
    """Return midnight of ``day`` in ``tz`` expressed in UTC."""
    local = tz.localize(datetime.combine(day, time.min))
    return local.astimezone(pytz.UTC)


def local_day_bounds(
    tz: pytz.BaseTzInfo, now: Optional[datetime] = None
) -> Tuple[datetime, datetime]:
    """
    Get the UTC bounds of the current local day.

    Args:
        tz: Timezone defining the local day
        now: Reference instant (defaults to now)

    Returns:
        (start, end) where end is the next local midnight
    """
    reference = ensure_utc(now or utc_now()).astimezone(tz)
    today = reference.date()
    return local_midnight_utc(tz, today), local_midnight_utc(tz, today + timedelta(days=1))


def local_month_start(tz: pytz.BaseTzInfo, now: Optional[datetime] = None) -> datetime:
    """Return the first instant of the current local month in UTC."""
    reference = ensure_utc(now or utc_now()).astimezone(tz)
    return local_midnight_utc(tz, reference.date().replace(day=1))
