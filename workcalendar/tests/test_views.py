from datetime import date
from unittest import mock

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APISimpleTestCase

from upstream.tests.fakes import FakeWorklogClient, month_payload

AUTH = {"HTTP_AUTHORIZATION": "Bearer token-123"}


class CalendarViewTests(APISimpleTestCase):
    def setUp(self):
        cache.clear()
        self.upstream = FakeWorklogClient(months={(2024, 1): month_payload(date(2024, 1, 26))})
        patcher = mock.patch("workcalendar.views.get_upstream_client", return_value=self.upstream)
        self.get_client = patcher.start()
        self.addCleanup(patcher.stop)

    def test_requires_bearer_token(self):
        response = self.client.get(reverse("calendar-month", args=[2024, 1]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIs(response.json()["success"], False)
        self.get_client.assert_not_called()

    def test_month_lists_flags_for_every_day(self):
        response = self.client.get(reverse("calendar-month", args=[2024, 1]), **AUTH)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body["success"])
        days = {day["date"]: day for day in body["data"]["days"]}
        self.assertEqual(len(days), 31)

        self.assertEqual(days["2024-01-13"]["non_working_reason"], "2nd/4th Saturday")
        self.assertEqual(days["2024-01-13"]["week_of_month"], 2)
        self.assertEqual(days["2024-01-14"]["day_of_week"], 0)
        self.assertTrue(days["2024-01-26"]["is_holiday"])
        self.assertTrue(days["2024-01-26"]["comp_off_eligible"])
        self.assertFalse(days["2024-01-26"]["is_non_working"])
        self.assertFalse(days["2024-01-25"]["comp_off_eligible"])

    def test_invalid_month_is_rejected(self):
        response = self.client.get(reverse("calendar-month", args=[2024, 13]), **AUTH)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_invalidates_month(self):
        self.client.get(reverse("calendar-month", args=[2024, 1]), **AUTH)
        self.client.get(reverse("calendar-month", args=[2024, 1]), **AUTH)
        self.assertEqual(len(self.upstream.calls_of("monthly")), 1)

        response = self.client.post(reverse("calendar-month-refresh", args=[2024, 1]), **AUTH)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.client.get(reverse("calendar-month", args=[2024, 1]), **AUTH)
        self.assertEqual(len(self.upstream.calls_of("monthly")), 2)

    def test_comp_off_eligibility_for_a_day(self):
        response = self.client.get(reverse("calendar-comp-off-eligibility", args=["2024-01-26"]), **AUTH)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()["data"]
        self.assertEqual(data["date"], "2024-01-26")
        self.assertTrue(data["comp_off_eligible"])

        response = self.client.get(reverse("calendar-comp-off-eligibility", args=["2024-01-25"]), **AUTH)
        self.assertFalse(response.json()["data"]["comp_off_eligible"])

    def test_comp_off_eligibility_rejects_bad_dates(self):
        response = self.client.get(reverse("calendar-comp-off-eligibility", args=["2024-02-30"]), **AUTH)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
