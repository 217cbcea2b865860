from django.urls import path

from .views import (
    CompOffRequestView,
    LeaveApplicationCheckView,
    LeaveApplicationView,
    LeaveTimesheetConflictView,
    LiveLeaveValidationView,
    LiveTimesheetCheckView,
    TimesheetLeaveConflictView,
    TimesheetSubmissionView,
)

urlpatterns = [
    path("conflicts/leave-timesheet/", LeaveTimesheetConflictView.as_view(), name="conflict-leave-timesheet"),
    path("conflicts/timesheet-leave/", TimesheetLeaveConflictView.as_view(), name="conflict-timesheet-leave"),
    path("conflicts/leave-application/", LeaveApplicationCheckView.as_view(), name="conflict-leave-application"),
    path("conflicts/live/leave/", LiveLeaveValidationView.as_view(), name="conflict-live-leave"),
    path("conflicts/live/timesheet/", LiveTimesheetCheckView.as_view(), name="conflict-live-timesheet"),
    path("leaves/application/", LeaveApplicationView.as_view(), name="leave-application"),
    path("timesheets/submit/", TimesheetSubmissionView.as_view(), name="timesheet-submit"),
    path("compoff/request/", CompOffRequestView.as_view(), name="compoff-request"),
]
