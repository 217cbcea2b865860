"""
Conflict rules between leave requests and timesheet entries.

Every check here is advisory. Lookups that come back 404 mean "nothing there";
any other upstream failure is logged and the check reports no conflict, leaving
the final decision to the backend mutation.
"""
import logging
from datetime import date
from typing import Optional

from upstream.client import UpstreamApiError
from upstream.payloads import FULL_DAY, HALF_DAY, STATE_APPROVED
from workcalendar.rules import iter_days, non_working_reason

from .defaults import max_hours_with_half_day_leave
from .results import (
    COMP_OFF_WORKING_DAY,
    FULL_DAY_LEAVE,
    HALF_DAY_LEAVE_HOURS_EXCEEDED,
    HOLIDAY,
    NO_CONFLICT,
    NON_WORKING_DAY,
    OVERLAPPING_LEAVE,
    TIMESHEET_EXISTS,
    ConflictCheckResult,
    format_display_date,
    format_hours,
)

logger = logging.getLogger(__name__)


def _resolve_max_hours(max_hours: Optional[float]) -> float:
    return float(max_hours) if max_hours is not None else max_hours_with_half_day_leave()


def _timesheet_hours(client, day: date) -> float:
    try:
        return client.get_timesheet_for_date(day).total_hours
    except UpstreamApiError as exc:
        if exc.is_not_found:
            return 0.0
        raise


def _relevant_leaves(client, start: Optional[date] = None, end: Optional[date] = None):
    try:
        leaves = client.get_leave_requests(start, end)
    except UpstreamApiError as exc:
        if exc.is_not_found:
            return []
        raise
    return [leave for leave in leaves if leave.is_relevant]


def check_leave_conflict_with_timesheet(
    client,
    start_date: date,
    end_date: date,
    duration_type: str,
    *,
    max_hours: Optional[float] = None,
) -> ConflictCheckResult:
    """
    Decide whether a proposed leave collides with hours already logged.

    A single-day full-day leave is blocked by any logged hours; a half-day leave
    only when the logged total exceeds the half-day limit. Multi-day ranges are
    scanned one day at a time and stop at the first day with hours.
    """
    limit = _resolve_max_hours(max_hours)
    try:
        if start_date == end_date:
            total_hours = _timesheet_hours(client, start_date)
            if total_hours <= 0:
                return NO_CONFLICT
            display = format_display_date(start_date)
            if duration_type == FULL_DAY:
                return ConflictCheckResult.conflict(
                    TIMESHEET_EXISTS,
                    f"Cannot apply full-day leave. You have already logged {format_hours(total_hours)} hours "
                    f"of timesheet entries for {display}. Please remove the timesheet entries before "
                    "applying for leave.",
                    existing_hours=total_hours,
                    conflict_date=start_date,
                )
            if duration_type == HALF_DAY and total_hours > limit:
                return ConflictCheckResult.conflict(
                    HALF_DAY_LEAVE_HOURS_EXCEEDED,
                    f"Cannot apply half-day leave. You have already logged {format_hours(total_hours)} hours "
                    f"for {display}, which exceeds the maximum of {format_hours(limit)} hours allowed with "
                    "a half-day leave. Please adjust your timesheet entries.",
                    existing_hours=total_hours,
                    max_allowed_hours=limit,
                    conflict_date=start_date,
                )
            return NO_CONFLICT

        for day in iter_days(start_date, end_date):
            total_hours = _timesheet_hours(client, day)
            if total_hours > 0:
                return ConflictCheckResult.conflict(
                    TIMESHEET_EXISTS,
                    f"Cannot apply leave. You have timesheet entries for {format_display_date(day)} "
                    f"({format_hours(total_hours)} hours). Please remove all timesheet entries for the "
                    "selected date range before applying for leave.",
                    existing_hours=total_hours,
                    conflict_date=day,
                )
        return NO_CONFLICT
    except Exception:
        logger.exception("Error checking leave-timesheet conflict for %s..%s", start_date, end_date)
        return NO_CONFLICT


def check_timesheet_conflict_with_leave(
    client,
    activity_date: date,
    total_hours: float,
    *,
    max_hours: Optional[float] = None,
) -> ConflictCheckResult:
    """Decide whether hours being logged for ``activity_date`` collide with a leave."""
    limit = _resolve_max_hours(max_hours)
    try:
        covering = [
            leave
            for leave in _relevant_leaves(client, activity_date, activity_date)
            if leave.covers(activity_date)
        ]
        if not covering:
            return NO_CONFLICT

        # Backend order decides when several leaves cover the day.
        leave = covering[0]
        display = format_display_date(activity_date)
        if leave.duration_type == FULL_DAY:
            return ConflictCheckResult.conflict(
                FULL_DAY_LEAVE,
                f"Cannot submit timesheet. You have a {leave.state} full-day leave for {display}. "
                "Please cancel the leave before submitting timesheet entries.",
                conflict_date=activity_date,
            )
        if leave.duration_type == HALF_DAY and total_hours > limit:
            return ConflictCheckResult.conflict(
                HALF_DAY_LEAVE_HOURS_EXCEEDED,
                f"Cannot submit timesheet. You have a {leave.state} half-day leave for {display}. "
                f"Maximum allowed hours for this date is {format_hours(limit)}, but you are trying to "
                f"submit {format_hours(total_hours)} hours.",
                existing_hours=total_hours,
                max_allowed_hours=limit,
                conflict_date=activity_date,
            )
        return NO_CONFLICT
    except Exception:
        logger.exception("Error checking timesheet-leave conflict for %s", activity_date)
        return NO_CONFLICT


def check_overlapping_leaves(client, start_date: date, end_date: date) -> ConflictCheckResult:
    """Reject a leave whose range overlaps an existing pending or approved leave."""
    try:
        # The listing endpoint is not guaranteed to filter by date, so overlap is
        # decided here against the full list.
        overlapping = [leave for leave in _relevant_leaves(client) if leave.overlaps(start_date, end_date)]
        if not overlapping:
            return NO_CONFLICT

        existing = overlapping[0]
        status_label = "approved" if existing.state == STATE_APPROVED else "pending"
        first = format_display_date(existing.start_date)
        last = format_display_date(existing.end_date)
        period = first if first == last else f"{first} to {last}"
        duration_label = (existing.duration_type or FULL_DAY).replace("_", "-", 1)
        return ConflictCheckResult.conflict(
            OVERLAPPING_LEAVE,
            f"Cannot apply leave. You already have a {status_label} {duration_label} leave request for "
            f"{period}. Please cancel or modify the existing leave before applying for overlapping dates.",
            conflict_date=max(existing.start_date, start_date),
        )
    except Exception:
        logger.exception("Error checking overlapping leaves for %s..%s", start_date, end_date)
        return NO_CONFLICT


def check_leave_dates_are_working(holiday_calendar, start_date: date, end_date: date) -> ConflictCheckResult:
    """Leave may only be taken on working days that are not holidays."""
    for day in iter_days(start_date, end_date):
        reason = non_working_reason(day)
        if reason:
            return ConflictCheckResult.conflict(
                NON_WORKING_DAY,
                f"Cannot apply leave for {format_display_date(day)}. This is a non-working day ({reason}). "
                "Please select only working days for your leave application.",
                conflict_date=day,
            )
        if holiday_calendar.is_holiday(day):
            return ConflictCheckResult.conflict(
                HOLIDAY,
                f"Cannot apply leave for {format_display_date(day)}. This date is marked as a holiday. "
                "Please exclude holidays from your leave application.",
                conflict_date=day,
            )
    return NO_CONFLICT


def validate_leave_application(
    client,
    holiday_calendar,
    start_date: date,
    end_date: date,
    duration_type: str,
    *,
    max_hours: Optional[float] = None,
) -> ConflictCheckResult:
    """Run every leave-side check in order; the first conflict wins."""
    result = check_overlapping_leaves(client, start_date, end_date)
    if result.has_conflict:
        return result
    result = check_leave_dates_are_working(holiday_calendar, start_date, end_date)
    if result.has_conflict:
        return result
    return check_leave_conflict_with_timesheet(client, start_date, end_date, duration_type, max_hours=max_hours)


def check_comp_off_dates(holiday_calendar, start_date: date, end_date: date) -> ConflictCheckResult:
    """Comp-off is only granted for work done on non-working days or holidays."""
    for day in iter_days(start_date, end_date):
        if not holiday_calendar.is_comp_off_eligible(day):
            return ConflictCheckResult.conflict(
                COMP_OFF_WORKING_DAY,
                f"Cannot request comp-off for {format_display_date(day)}. It is a regular working day; "
                "comp-off can only be requested for Sundays, 2nd/4th Saturdays or holidays.",
                conflict_date=day,
            )
    return NO_CONFLICT
