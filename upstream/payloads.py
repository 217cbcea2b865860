"""
Read-only views over the JSON documents returned by the upstream API.

The upstream endpoints are not consistent about envelopes (a list may come back
bare or wrapped in ``{"data": [...]}``) nor about the shape of a leave state
(``"approved"`` vs ``{"code": "approved", "name": "Approved"}``), so every
document is normalised here before the rule modules see it.
"""
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional

from django.utils.dateparse import parse_date, parse_datetime

FULL_DAY = "full_day"
HALF_DAY = "half_day"
DURATION_TYPES = (FULL_DAY, HALF_DAY)

FIRST_HALF = "first_half"
SECOND_HALF = "second_half"
HALF_DAY_SEGMENTS = (FIRST_HALF, SECOND_HALF)

STATE_PENDING = "pending"
STATE_APPROVED = "approved"
STATE_REJECTED = "rejected"
RELEVANT_LEAVE_STATES = {STATE_PENDING, STATE_APPROVED}


def unwrap_list(payload: Any) -> list:
    """Return the list carried by ``payload`` (bare or under ``data``)."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return []


def unwrap_object(payload: Any, marker: str) -> dict:
    """Return the object carrying ``marker`` (bare or under ``data``)."""
    if isinstance(payload, dict):
        if marker in payload:
            return payload
        inner = payload.get("data")
        if isinstance(inner, dict):
            return inner
    return {}


def parse_hours(value: Any) -> float:
    """Coerce an hour total to a finite float; anything else reads as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    return hours if math.isfinite(hours) else 0.0


def parse_api_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        return None
    if parsed:
        return parsed
    try:
        stamp = parse_datetime(value)
    except ValueError:
        return None
    return stamp.date() if stamp else None


def leave_state_code(state: Any) -> str:
    if isinstance(state, dict):
        state = state.get("code")
    return str(state or "").strip().lower()


@dataclass
class TimesheetDay:
    work_date: date
    total_hours: float = 0.0
    entries: List[dict] = field(default_factory=list)

    @classmethod
    def from_payload(cls, work_date: date, payload: Any) -> "TimesheetDay":
        data = unwrap_object(payload, "totalHours")
        entries = data.get("entries")
        return cls(
            work_date=parse_api_date(data.get("workDate")) or work_date,
            total_hours=parse_hours(data.get("totalHours")),
            entries=entries if isinstance(entries, list) else [],
        )


@dataclass
class LeaveRequest:
    id: Any
    start_date: date
    end_date: date
    duration_type: str
    state: str
    hours: float = 0.0
    half_day_segment: Optional[str] = None

    @classmethod
    def from_payload(cls, item: dict) -> Optional["LeaveRequest"]:
        """Build a leave from one upstream item; items without usable dates are skipped."""
        if not isinstance(item, dict):
            return None
        start = parse_api_date(item.get("startDate"))
        end = parse_api_date(item.get("endDate")) or start
        if start is None:
            return None
        return cls(
            id=item.get("id"),
            start_date=start,
            end_date=end,
            duration_type=str(item.get("durationType") or "").strip().lower(),
            state=leave_state_code(item.get("state")),
            hours=parse_hours(item.get("hours")),
            half_day_segment=item.get("halfDaySegment"),
        )

    @property
    def is_relevant(self) -> bool:
        return self.state in RELEVANT_LEAVE_STATES

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return start <= self.end_date and end >= self.start_date


def parse_leave_requests(payload: Any) -> List[LeaveRequest]:
    leaves = []
    for item in unwrap_list(payload):
        leave = LeaveRequest.from_payload(item)
        if leave is not None:
            leaves.append(leave)
    return leaves


def parse_holiday_dates(payload: Any) -> set:
    """Extract the ISO dates flagged ``isHoliday`` from a monthly-timesheet document."""
    data = unwrap_object(payload, "days")
    holidays = set()
    for day in data.get("days") or []:
        if not isinstance(day, dict) or day.get("isHoliday") is not True:
            continue
        parsed = parse_api_date(day.get("date"))
        if parsed:
            holidays.add(parsed.isoformat())
    return holidays
