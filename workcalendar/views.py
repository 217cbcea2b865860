from datetime import date

from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.views import APIView

from upstream.client import get_upstream_client
from upstream.utils import api_response

from .holidays import HolidayCalendar
from .rules import day_of_week, month_days, non_working_reason, week_of_month
from .serializers import CalendarMonthSerializer


def _valid_month(year: int, month: int) -> bool:
    return 1 <= month <= 12 and date.min.year <= year <= date.max.year


def describe_day(day: date, holidays: set) -> dict:
    reason = non_working_reason(day)
    is_holiday = day.isoformat() in holidays
    return {
        "date": day,
        "day_of_week": day_of_week(day),
        "week_of_month": week_of_month(day),
        "is_non_working": reason is not None,
        "non_working_reason": reason,
        "is_holiday": is_holiday,
        "comp_off_eligible": reason is not None or is_holiday,
    }


class CalendarMonthView(APIView):
    """Per-day working/holiday flags for date pickers."""

    def get(self, request, year, month):
        if not _valid_month(year, month):
            return api_response(success=False, message="Invalid month.", status=status.HTTP_400_BAD_REQUEST)
        calendar = HolidayCalendar(get_upstream_client(request))
        holidays = calendar.holidays_for_month(year, month)
        payload = CalendarMonthSerializer(
            {
                "year": year,
                "month": month,
                "days": [describe_day(day, holidays) for day in month_days(year, month)],
            }
        ).data
        return api_response(success=True, message="Calendar loaded.", data=payload)


class CalendarMonthRefreshView(APIView):
    def post(self, request, year, month):
        if not _valid_month(year, month):
            return api_response(success=False, message="Invalid month.", status=status.HTTP_400_BAD_REQUEST)
        HolidayCalendar(get_upstream_client(request)).invalidate(year, month)
        return api_response(success=True, message="Calendar cache cleared.", data={"year": year, "month": month})


class CompOffEligibilityView(APIView):
    def get(self, request, day):
        try:
            parsed = parse_date(day)
        except ValueError:
            parsed = None
        if parsed is None:
            return api_response(success=False, message="Invalid date.", status=status.HTTP_400_BAD_REQUEST)
        calendar = HolidayCalendar(get_upstream_client(request))
        holidays = calendar.holidays_for_month(parsed.year, parsed.month)
        payload = describe_day(parsed, holidays)
        payload["date"] = parsed.isoformat()
        return api_response(success=True, message="Eligibility computed.", data=payload)
