from decimal import Decimal

from rest_framework import serializers

from upstream.payloads import DURATION_TYPES, HALF_DAY, HALF_DAY_SEGMENTS
from .defaults import get_validation_value
from .results import CONFLICT_TYPES


def _validate_date_range(attrs, start_field, end_field, message):
    start = attrs.get(start_field)
    end = attrs.get(end_field)
    if start and end and end < start:
        raise serializers.ValidationError({end_field: message})
    max_days = int(get_validation_value("MAX_LEAVE_RANGE_DAYS"))
    if start and end and (end - start).days + 1 > max_days:
        raise serializers.ValidationError({end_field: f"A single request cannot span more than {max_days} days."})


def _validate_min_length(value, setting_name, label):
    minimum = int(get_validation_value(setting_name))
    if len(value or "") < minimum:
        raise serializers.ValidationError(f"Please provide at least {minimum} characters for the {label}.")
    return value


class LeaveRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    duration_type = serializers.ChoiceField(choices=DURATION_TYPES)

    def validate(self, attrs):
        _validate_date_range(attrs, "start_date", "end_date", "End date must be on or after the start date.")
        if attrs.get("duration_type") == HALF_DAY and attrs.get("start_date") != attrs.get("end_date"):
            raise serializers.ValidationError({"end_date": "Half-day leave must start and end on the same date."})
        return attrs


class TimesheetConflictCheckSerializer(serializers.Serializer):
    activity_date = serializers.DateField()
    total_hours = serializers.FloatField(min_value=0)


class LiveLeaveValidationSerializer(LeaveRangeSerializer):
    """Leave range typed so far, numbered by the form so late answers can be dropped."""

    generation = serializers.IntegerField(min_value=1)


class LiveTimesheetCheckSerializer(TimesheetConflictCheckSerializer):
    generation = serializers.IntegerField(min_value=1)


class LeaveApplicationSerializer(LeaveRangeSerializer):
    leave_type = serializers.CharField(max_length=50)
    reason = serializers.CharField(trim_whitespace=True)
    half_day_segment = serializers.ChoiceField(choices=HALF_DAY_SEGMENTS, required=False, allow_null=True)

    def validate_reason(self, value):
        return _validate_min_length(value, "MIN_LEAVE_REASON_LENGTH", "reason")

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get("duration_type") == HALF_DAY and not attrs.get("half_day_segment"):
            raise serializers.ValidationError({"half_day_segment": "Select which half of the day you are taking off."})
        return attrs

    def to_upstream_payload(self) -> dict:
        data = self.validated_data
        payload = {
            "leaveType": data["leave_type"],
            "reason": data["reason"],
            "startDate": data["start_date"].isoformat(),
            "endDate": data["end_date"].isoformat(),
            "durationType": data["duration_type"],
        }
        if data.get("half_day_segment"):
            payload["halfDaySegment"] = data["half_day_segment"]
        return payload


class TimesheetEntrySerializer(serializers.Serializer):
    project_id = serializers.IntegerField(min_value=1)
    task_title = serializers.CharField(required=False, allow_blank=True, default="")
    task_description = serializers.CharField(trim_whitespace=True)
    hours = serializers.DecimalField(max_digits=5, decimal_places=2)

    def validate_task_title(self, value):
        maximum = int(get_validation_value("MAX_TASK_TITLE_LENGTH"))
        if len(value) > maximum:
            raise serializers.ValidationError(f"Task title cannot exceed {maximum} characters.")
        return value

    def validate_task_description(self, value):
        return _validate_min_length(value, "MIN_TASK_DESCRIPTION_LENGTH", "task description")

    def validate_hours(self, value):
        minimum = Decimal(str(get_validation_value("MIN_HOURS_PER_ENTRY")))
        maximum = Decimal(str(get_validation_value("MAX_HOURS_PER_ENTRY")))
        step = Decimal(str(get_validation_value("HOURS_INPUT_STEP")))
        if value < minimum or value > maximum:
            raise serializers.ValidationError(f"Hours must be between {minimum} and {maximum}.")
        if step and value % step != 0:
            raise serializers.ValidationError(f"Hours must be in steps of {step}.")
        return value


class TimesheetSubmissionSerializer(serializers.Serializer):
    activity_date = serializers.DateField()
    entries = TimesheetEntrySerializer(many=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_entries(self, value):
        if not value:
            raise serializers.ValidationError("Add at least one activity entry.")
        return value

    @property
    def total_hours(self) -> float:
        return float(sum(entry["hours"] for entry in self.validated_data["entries"]))

    def to_upstream_payload(self) -> dict:
        data = self.validated_data
        return {
            "activityDate": data["activity_date"].isoformat(),
            "entries": [
                {
                    "projectId": entry["project_id"],
                    "taskTitle": entry.get("task_title") or None,
                    "taskDescription": entry["task_description"],
                    "hours": float(entry["hours"]),
                }
                for entry in data["entries"]
            ],
            "notes": data.get("notes", ""),
        }


class CompOffRequestSerializer(serializers.Serializer):
    employee_email = serializers.EmailField()
    reason_for_working = serializers.CharField(trim_whitespace=True)
    from_date = serializers.DateField()
    to_date = serializers.DateField()
    duration_type = serializers.ChoiceField(choices=DURATION_TYPES)

    def validate_reason_for_working(self, value):
        return _validate_min_length(value, "MIN_LEAVE_REASON_LENGTH", "reason")

    def validate(self, attrs):
        _validate_date_range(attrs, "from_date", "to_date", "To date must be on or after the from date.")
        return attrs

    def to_upstream_payload(self) -> dict:
        data = self.validated_data
        return {
            "employeeEmail": data["employee_email"],
            "reasonForWorking": data["reason_for_working"],
            "fromDate": data["from_date"].isoformat(),
            "toDate": data["to_date"].isoformat(),
            "durationType": data["duration_type"],
        }


class ConflictCheckResultSerializer(serializers.Serializer):
    has_conflict = serializers.BooleanField()
    conflict_type = serializers.ChoiceField(choices=CONFLICT_TYPES, allow_null=True)
    message = serializers.CharField(allow_blank=True)
    existing_hours = serializers.FloatField(allow_null=True)
    max_allowed_hours = serializers.FloatField(allow_null=True)
    conflict_date = serializers.DateField(allow_null=True)
