"""Calendar math primitives for recurrence expansion.

All functions work on timezone-naive ``datetime.date`` values. Month and year
arithmetic uses "exact day or skip" semantics: when the anchor day does not
exist in the target period the helper returns ``None`` instead of clamping.
"""

import calendar
import math
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from typing import Optional, Union


def is_leap_year(year: int) -> bool:
    """Check whether a year is a Gregorian leap year.

    Args:
        year: Four-digit year.

    Returns:
        True if the year has a February 29th.
    """
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month.

    Args:
        year: Four-digit year.
        month: Month number (1-12).

    Returns:
        Number of days (28-31).
    """
    return calendar.monthrange(year, month)[1]


def add_days(value: date, days: int) -> date:
    """Shift a date by a number of days."""
    return value + timedelta(days=days)


def add_weeks(value: date, weeks: int) -> date:
    """Shift a date by a number of weeks."""
    return add_days(value, 7 * weeks)


def _shift_month(value: date, months: int) -> Optional[tuple[int, int]]:
    total = value.year * 12 + (value.month - 1) + months
    year, month_index = divmod(total, 12)
    if year < MINYEAR or year > MAXYEAR:
        return None
    return year, month_index + 1


def month_start(value: date, months: int) -> Optional[date]:
    """Return the first day of the month ``months`` after ``value``'s month.

    Used as the period start bound check when a candidate period is skipped.

    Args:
        value: Reference date.
        months: Number of months to advance.

    Returns:
        First day of the target month, or None if it is out of range.
    """
    shifted = _shift_month(value, months)
    if shifted is None:
        return None
    year, month = shifted
    return date(year, month, 1)


def add_exact_months(
    value: date, months: int, anchor_day: Optional[int] = None
) -> Optional[date]:
    """Advance by whole months, keeping the anchor day exactly.

    Args:
        value: Reference date.
        months: Number of months to advance.
        anchor_day: Day of month to land on (defaults to ``value.day``).

    Returns:
        The shifted date, or None if the anchor day does not exist in the
        target month (e.g. the 31st in April).
    """
    day = anchor_day if anchor_day is not None else value.day
    shifted = _shift_month(value, months)
    if shifted is None:
        return None
    year, month = shifted
    if day > days_in_month(year, month):
        return None
    return date(year, month, day)


def add_exact_years(
    value: date,
    years: int,
    anchor_month: Optional[int] = None,
    anchor_day: Optional[int] = None,
) -> Optional[date]:
    """Advance by whole years, keeping the anchor month and day exactly.

    Args:
        value: Reference date.
        years: Number of years to advance.
        anchor_month: Month to land on (defaults to ``value.month``).
        anchor_day: Day of month to land on (defaults to ``value.day``).

    Returns:
        The shifted date, or None if the (month, day) pair does not exist in
        the target year (e.g. February 29th in a common year).
    """
    month = anchor_month if anchor_month is not None else value.month
    day = anchor_day if anchor_day is not None else value.day
    year = value.year + years
    if year < MINYEAR or year > MAXYEAR:
        return None
    if month == 2 and day == 29 and not is_leap_year(year):
        return None
    if day > days_in_month(year, month):
        return None
    return date(year, month, day)


def clamp_interval(value: Union[int, float, None]) -> int:
    """Coerce a repeat interval into a positive integer.

    Args:
        value: Raw interval, possibly NaN, infinite, fractional or below 1.

    Returns:
        ``floor(value)`` for finite values >= 1, otherwise 1.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1
    if not math.isfinite(value) or value < 1:
        return 1
    return int(math.floor(value))


def format_ymd(value: date) -> str:
    """Serialize a date as ``YYYY-MM-DD``."""
    return value.isoformat()


def parse_ymd(value: Union[str, date]) -> date:
    """Parse a ``YYYY-MM-DD`` string (dates pass through unchanged).

    Raises:
        ValueError: If the string is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)
