"""Calendar arithmetic used by the schedule, budget and reminder logic"""

import zoneinfo
from datetime import date, datetime, timedelta, timezone
from typing import Tuple

from dateutil.relativedelta import relativedelta


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)


def add_weeks(from_date: date, weeks: int) -> date:
    return from_date + timedelta(weeks=weeks)


def add_months(from_date: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the target month's last day.

    Example:
        2023-01-31 + 1 month → 2023-02-28
        2024-01-31 + 1 month → 2024-02-29
    """
    return from_date + relativedelta(months=months)


def as_date(value: date | datetime) -> date:
    """Truncate datetimes to their calendar day"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole calendar days from start to end (negative when end is earlier)"""
    return (as_date(end) - as_date(start)).days


def month_bounds(day: date) -> Tuple[date, date]:
    """First and last day of the month containing `day`"""
    first = day.replace(day=1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last


def now_in(tz_name: str) -> datetime:
    """Current timestamp in the given IANA timezone"""
    return datetime.now(zoneinfo.ZoneInfo(tz_name))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
