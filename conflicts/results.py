"""Outcome of a conflict check and the strings used to describe it."""
from dataclasses import dataclass
from datetime import date
from typing import Optional

FULL_DAY_LEAVE = "full_day_leave"
HALF_DAY_LEAVE_HOURS_EXCEEDED = "half_day_leave_hours_exceeded"
TIMESHEET_EXISTS = "timesheet_exists"
OVERLAPPING_LEAVE = "overlapping_leave"
NON_WORKING_DAY = "non_working_day"
HOLIDAY = "holiday"
COMP_OFF_WORKING_DAY = "comp_off_working_day"

CONFLICT_TYPES = (
    FULL_DAY_LEAVE,
    HALF_DAY_LEAVE_HOURS_EXCEEDED,
    TIMESHEET_EXISTS,
    OVERLAPPING_LEAVE,
    NON_WORKING_DAY,
    HOLIDAY,
    COMP_OFF_WORKING_DAY,
)


@dataclass(frozen=True)
class ConflictCheckResult:
    """
    Answer of a single conflict check.

    ``existing_hours`` and ``max_allowed_hours`` are only filled for hour based
    conflicts; ``conflict_date`` names the first offending day when a range was
    scanned.
    """

    has_conflict: bool
    conflict_type: Optional[str] = None
    message: str = ""
    existing_hours: Optional[float] = None
    max_allowed_hours: Optional[float] = None
    conflict_date: Optional[date] = None

    @classmethod
    def ok(cls) -> "ConflictCheckResult":
        return cls(has_conflict=False)

    @classmethod
    def conflict(cls, conflict_type: str, message: str, **extra) -> "ConflictCheckResult":
        return cls(has_conflict=True, conflict_type=conflict_type, message=message, **extra)


NO_CONFLICT = ConflictCheckResult.ok()


def format_display_date(day: date) -> str:
    """Long form used in user-facing messages, e.g. ``January 11, 2024``."""
    return f"{day:%B} {day.day}, {day.year}"


def format_hours(hours: float) -> str:
    return f"{hours:g}"
