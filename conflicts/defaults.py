"""
Validation limits shared by the conflict checkers and the request serializers.

Values come from ``settings.WORKLOG_VALIDATION``; anything missing there falls
back to ``DEFAULT_VALIDATION``.
"""
from django.conf import settings

DEFAULT_VALIDATION = {
    # Most timesheet hours a day may carry when it also has a half-day leave.
    "MAX_HOURS_WITH_HALF_DAY_LEAVE": 6,
    "MIN_HOURS_PER_ENTRY": 0.5,
    "MAX_HOURS_PER_ENTRY": 15,
    "HOURS_INPUT_STEP": 0.5,
    "MIN_TASK_DESCRIPTION_LENGTH": 10,
    "MAX_TASK_TITLE_LENGTH": 200,
    "MIN_LEAVE_REASON_LENGTH": 10,
    # Longest leave or comp-off range; a timesheet scan costs one upstream call per day.
    "MAX_LEAVE_RANGE_DAYS": 92,
}


def get_validation_settings() -> dict:
    return {**DEFAULT_VALIDATION, **(getattr(settings, "WORKLOG_VALIDATION", None) or {})}


def get_validation_value(name: str):
    return get_validation_settings()[name]


def max_hours_with_half_day_leave() -> float:
    return float(get_validation_value("MAX_HOURS_WITH_HALF_DAY_LEAVE"))
