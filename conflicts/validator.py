"""
Facade over the conflict rules for views and other callers.

A validator is built per request: it carries that caller's upstream client,
the shared holiday calendar and a sequencer scoped to the caller.
"""
from datetime import date
from typing import Optional

from workcalendar.holidays import HolidayCalendar

from .results import ConflictCheckResult
from .sequencing import ValidationSequencer
from .services import (
    check_comp_off_dates,
    check_leave_conflict_with_timesheet,
    check_leave_dates_are_working,
    check_overlapping_leaves,
    check_timesheet_conflict_with_leave,
    validate_leave_application,
)

LEAVE_CHANNEL = "leave"
TIMESHEET_CHANNEL = "timesheet"


class ConflictValidator:
    """
    Owns the collaborators the conflict rules need: the upstream client, the
    holiday calendar (and its cache) and the live-validation sequencer.
    """

    def __init__(self, client, holiday_calendar: Optional[HolidayCalendar] = None,
                 sequencer: Optional[ValidationSequencer] = None, max_hours: Optional[float] = None):
        self.client = client
        self.holiday_calendar = holiday_calendar or HolidayCalendar(client)
        self.sequencer = sequencer or ValidationSequencer()
        self.max_hours = max_hours

    def check_leave_against_timesheet(self, start_date: date, end_date: date, duration_type: str) -> ConflictCheckResult:
        return check_leave_conflict_with_timesheet(
            self.client, start_date, end_date, duration_type, max_hours=self.max_hours
        )

    def check_timesheet_against_leave(self, activity_date: date, total_hours: float) -> ConflictCheckResult:
        return check_timesheet_conflict_with_leave(
            self.client, activity_date, total_hours, max_hours=self.max_hours
        )

    def check_overlapping_leaves(self, start_date: date, end_date: date) -> ConflictCheckResult:
        return check_overlapping_leaves(self.client, start_date, end_date)

    def check_working_days(self, start_date: date, end_date: date) -> ConflictCheckResult:
        return check_leave_dates_are_working(self.holiday_calendar, start_date, end_date)

    def validate_leave_application(self, start_date: date, end_date: date, duration_type: str) -> ConflictCheckResult:
        return validate_leave_application(
            self.client, self.holiday_calendar, start_date, end_date, duration_type, max_hours=self.max_hours
        )

    def check_comp_off_dates(self, start_date: date, end_date: date) -> ConflictCheckResult:
        return check_comp_off_dates(self.holiday_calendar, start_date, end_date)

    def live_validate_leave(self, start_date: date, end_date: date, duration_type: str,
                            generation: Optional[int] = None) -> Optional[ConflictCheckResult]:
        """Like ``validate_leave_application``; ``None`` when a newer leave validation superseded this one."""
        return self.sequencer.run(
            LEAVE_CHANNEL, self.validate_leave_application, start_date, end_date, duration_type,
            generation=generation,
        )

    def live_check_timesheet(self, activity_date: date, total_hours: float,
                             generation: Optional[int] = None) -> Optional[ConflictCheckResult]:
        return self.sequencer.run(
            TIMESHEET_CHANNEL, self.check_timesheet_against_leave, activity_date, total_hours,
            generation=generation,
        )

    def invalidate_for_range(self, start_date: date, end_date: date):
        self.holiday_calendar.invalidate_range(start_date, end_date)
