"""
Work-week policy: which calendar days are non-working.

A day is non-working when it is a Sunday or a 2nd/4th Saturday. The week of
the month is ``ceil(day / 7)``, so the 8th-14th is always week 2 and the
22nd-28th week 4, whatever weekday the month starts on.
"""
import calendar
import math
from datetime import date, timedelta
from typing import Iterator, List, Optional

SUNDAY = 0
SATURDAY = 6
NON_WORKING_SATURDAY_WEEKS = {2, 4}


def day_of_week(day: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def week_of_month(day: date) -> int:
    return math.ceil(day.day / 7)


def is_non_working_day(day: date) -> bool:
    weekday = day_of_week(day)
    if weekday == SUNDAY:
        return True
    return weekday == SATURDAY and week_of_month(day) in NON_WORKING_SATURDAY_WEEKS


def non_working_reason(day: date) -> Optional[str]:
    """Human-readable label for a non-working day, ``None`` for working days."""
    if not is_non_working_day(day):
        return None
    return "Sunday" if day_of_week(day) == SUNDAY else "2nd/4th Saturday"


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_days(year: int, month: int) -> List[date]:
    _, last = calendar.monthrange(year, month)
    return list(iter_days(date(year, month, 1), date(year, month, last)))


def non_working_days_in_month(year: int, month: int) -> List[date]:
    return [day for day in month_days(year, month) if is_non_working_day(day)]


def months_spanned(start: date, end: date) -> List[tuple]:
    """(year, month) pairs touched by the inclusive range ``start``..``end``."""
    months = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((year, month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months
