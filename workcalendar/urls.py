from django.urls import path

from .views import CalendarMonthRefreshView, CalendarMonthView, CompOffEligibilityView

urlpatterns = [
    path("months/<int:year>/<int:month>/", CalendarMonthView.as_view(), name="calendar-month"),
    path("months/<int:year>/<int:month>/refresh/", CalendarMonthRefreshView.as_view(), name="calendar-month-refresh"),
    path("days/<str:day>/comp-off-eligibility/", CompOffEligibilityView.as_view(), name="calendar-comp-off-eligibility"),
]
