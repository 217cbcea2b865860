import logging

from django.conf import settings
from django_ratelimit.core import is_ratelimited
from rest_framework import status
from rest_framework.views import APIView

from upstream.client import UpstreamApiError, caller_key, get_upstream_client
from upstream.utils import api_response, upstream_error_response

from .serializers import (
    CompOffRequestSerializer,
    ConflictCheckResultSerializer,
    LeaveApplicationSerializer,
    LeaveRangeSerializer,
    LiveLeaveValidationSerializer,
    LiveTimesheetCheckSerializer,
    TimesheetConflictCheckSerializer,
    TimesheetSubmissionSerializer,
)
from .sequencing import ValidationSequencer
from .validator import ConflictValidator

logger = logging.getLogger(__name__)


def conflict_check_rate(group, request):
    return getattr(settings, "CONFLICT_CHECK_RATE", "120/m")


def build_validator(request) -> ConflictValidator:
    return ConflictValidator(get_upstream_client(request), sequencer=ValidationSequencer(scope=caller_key(request)))


def _rate_limited(request, group):
    if is_ratelimited(request, group=group, key="ip", rate=conflict_check_rate, method="POST", increment=True):
        return api_response(
            success=False,
            message="Too many requests.",
            status=status.HTTP_429_TOO_MANY_REQUESTS,
        )
    return None


def _invalid(serializer, message):
    return api_response(
        success=False,
        message=message,
        errors=serializer.errors,
        status=status.HTTP_400_BAD_REQUEST,
    )


def _check_response(result):
    return api_response(
        success=True,
        message=result.message or "No conflicts found.",
        data=ConflictCheckResultSerializer(result).data,
        status=status.HTTP_200_OK,
    )


def _conflict_response(result):
    return api_response(
        success=False,
        message=result.message,
        data=ConflictCheckResultSerializer(result).data,
        status=status.HTTP_409_CONFLICT,
    )


def _live_response(generation, result):
    if result is None:
        return api_response(
            success=True,
            message="Superseded by a newer validation.",
            data={"generation": generation, "stale": True, "result": None},
            status=status.HTTP_200_OK,
        )
    return api_response(
        success=True,
        message=result.message or "No conflicts found.",
        data={"generation": generation, "stale": False, "result": ConflictCheckResultSerializer(result).data},
        status=status.HTTP_200_OK,
    )


class LeaveTimesheetConflictView(APIView):
    """Does a proposed leave collide with hours already logged?"""

    def post(self, request):
        limited = _rate_limited(request, "conflicts_leave_timesheet")
        if limited:
            return limited
        serializer = LeaveRangeSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid leave range.")
        data = serializer.validated_data
        result = build_validator(request).check_leave_against_timesheet(
            data["start_date"], data["end_date"], data["duration_type"]
        )
        return _check_response(result)


class TimesheetLeaveConflictView(APIView):
    """Do hours being logged collide with a pending or approved leave?"""

    def post(self, request):
        limited = _rate_limited(request, "conflicts_timesheet_leave")
        if limited:
            return limited
        serializer = TimesheetConflictCheckSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid timesheet check.")
        data = serializer.validated_data
        result = build_validator(request).check_timesheet_against_leave(data["activity_date"], data["total_hours"])
        return _check_response(result)


class LeaveApplicationCheckView(APIView):
    def post(self, request):
        limited = _rate_limited(request, "conflicts_leave_application")
        if limited:
            return limited
        serializer = LeaveRangeSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid leave range.")
        data = serializer.validated_data
        result = build_validator(request).validate_leave_application(
            data["start_date"], data["end_date"], data["duration_type"]
        )
        return _check_response(result)


class LiveLeaveValidationView(APIView):
    """
    Validation while the leave form is being edited.

    The form numbers each request with an increasing ``generation``. Only the
    newest generation per caller gets a result; older ones come back with
    ``stale: true`` and are skipped without upstream calls when already behind.
    """

    def post(self, request):
        limited = _rate_limited(request, "conflicts_live")
        if limited:
            return limited
        serializer = LiveLeaveValidationSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid leave range.")
        data = serializer.validated_data
        result = build_validator(request).live_validate_leave(
            data["start_date"], data["end_date"], data["duration_type"], generation=data["generation"]
        )
        return _live_response(data["generation"], result)


class LiveTimesheetCheckView(APIView):
    def post(self, request):
        limited = _rate_limited(request, "conflicts_live")
        if limited:
            return limited
        serializer = LiveTimesheetCheckSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid timesheet check.")
        data = serializer.validated_data
        result = build_validator(request).live_check_timesheet(
            data["activity_date"], data["total_hours"], generation=data["generation"]
        )
        return _live_response(data["generation"], result)


class LeaveApplicationView(APIView):
    def post(self, request):
        serializer = LeaveApplicationSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid leave application.")
        data = serializer.validated_data
        validator = build_validator(request)
        result = validator.validate_leave_application(data["start_date"], data["end_date"], data["duration_type"])
        if result.has_conflict:
            return _conflict_response(result)

        try:
            payload = validator.client.submit_leave_application(serializer.to_upstream_payload())
        except UpstreamApiError as exc:
            logger.warning("Leave application rejected upstream: %s", exc)
            return upstream_error_response(exc, "Failed to submit leave application.")
        validator.invalidate_for_range(data["start_date"], data["end_date"])

        return api_response(
            success=True,
            message="Leave application submitted successfully.",
            data=payload,
            status=status.HTTP_201_CREATED,
        )


class TimesheetSubmissionView(APIView):
    def post(self, request):
        serializer = TimesheetSubmissionSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid timesheet submission.")
        activity_date = serializer.validated_data["activity_date"]
        validator = build_validator(request)
        result = validator.check_timesheet_against_leave(activity_date, serializer.total_hours)
        if result.has_conflict:
            return _conflict_response(result)

        try:
            payload = validator.client.submit_timesheet_entries(serializer.to_upstream_payload())
        except UpstreamApiError as exc:
            logger.warning("Timesheet submission rejected upstream: %s", exc)
            return upstream_error_response(exc, "Failed to submit timesheet.")
        validator.invalidate_for_range(activity_date, activity_date)

        return api_response(
            success=True,
            message="Timesheet submitted successfully.",
            data=payload,
            status=status.HTTP_201_CREATED,
        )


class CompOffRequestView(APIView):
    def post(self, request):
        serializer = CompOffRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer, "Invalid comp-off request.")
        data = serializer.validated_data
        validator = build_validator(request)
        result = validator.check_comp_off_dates(data["from_date"], data["to_date"])
        if result.has_conflict:
            return _conflict_response(result)

        try:
            payload = validator.client.submit_comp_off_request(serializer.to_upstream_payload())
        except UpstreamApiError as exc:
            logger.warning("Comp-off request rejected upstream: %s", exc)
            return upstream_error_response(exc, "Failed to submit comp-off request.")
        validator.invalidate_for_range(data["from_date"], data["to_date"])

        return api_response(
            success=True,
            message="Comp-Off request submitted successfully.",
            data=payload,
            status=status.HTTP_201_CREATED,
        )
