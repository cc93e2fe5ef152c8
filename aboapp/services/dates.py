"""
AboApp Backend — Calendar Date Helpers
========================================

Renewal dates are plain calendar dates (no time, no zone). The only place a
timezone matters is "today" for the reminder job and the cost overview,
which is taken in a fixed civil timezone so the job selects the same
renewals no matter where the server runs.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo


def today_in_timezone(tz_name: str, now: Optional[datetime] = None) -> date:
    """
    Calendar date in `tz_name` at instant `now` (default: current time).

    `now` must be timezone-aware when given.
    """
    zone = ZoneInfo(tz_name)
    if now is None:
        return datetime.now(zone).date()
    return now.astimezone(zone).date()


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def month_start(day: date) -> date:
    """First calendar day of the month containing `day`."""
    return day.replace(day=1)


def add_months(day: date, delta: int) -> date:
    """First day of the month `delta` months away from `day`'s month."""
    index = day.year * 12 + (day.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def trailing_month_starts(today: date, count: int) -> List[date]:
    """
    `count` month starts ending with today's month, oldest first.

    >>> trailing_month_starts(date(2025, 2, 10), 3)
    [datetime.date(2024, 12, 1), datetime.date(2025, 1, 1), datetime.date(2025, 2, 1)]
    """
    current = month_start(today)
    return [add_months(current, -offset) for offset in range(count - 1, -1, -1)]


def month_key(day: date) -> str:
    """YYYY-MM label used by the cost chart."""
    return day.strftime("%Y-%m")
