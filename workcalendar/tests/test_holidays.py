from datetime import date

from django.core.cache import cache
from django.test import SimpleTestCase

from upstream.tests.fakes import FakeWorklogClient, month_payload, server_error
from workcalendar.holidays import HolidayCalendar, MonthlyHolidayCache


class MonthlyHolidayCacheTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.holiday_cache = MonthlyHolidayCache(namespace="tests")

    def test_miss_then_hit(self):
        self.assertIsNone(self.holiday_cache.get(2024, 1))
        self.holiday_cache.set(2024, 1, {"2024-01-26"})
        self.assertEqual(self.holiday_cache.get(2024, 1), {"2024-01-26"})

    def test_empty_month_is_a_hit(self):
        self.holiday_cache.set(2024, 2, set())
        self.assertEqual(self.holiday_cache.get(2024, 2), set())

    def test_invalidate_only_touches_that_month(self):
        self.holiday_cache.set(2024, 1, {"2024-01-26"})
        self.holiday_cache.set(2024, 2, set())
        self.holiday_cache.invalidate(2024, 1)
        self.assertIsNone(self.holiday_cache.get(2024, 1))
        self.assertEqual(self.holiday_cache.get(2024, 2), set())

    def test_invalidate_range_covers_every_spanned_month(self):
        for month in (11, 12):
            self.holiday_cache.set(2024, month, set())
        self.holiday_cache.set(2025, 1, set())
        self.holiday_cache.set(2025, 2, set())
        self.holiday_cache.invalidate_range(date(2024, 11, 28), date(2025, 1, 3))
        self.assertIsNone(self.holiday_cache.get(2024, 11))
        self.assertIsNone(self.holiday_cache.get(2024, 12))
        self.assertIsNone(self.holiday_cache.get(2025, 1))
        self.assertEqual(self.holiday_cache.get(2025, 2), set())

    def test_clear_drops_everything_in_namespace(self):
        other = MonthlyHolidayCache(namespace="other")
        self.holiday_cache.set(2024, 1, {"2024-01-26"})
        other.set(2024, 1, {"2024-01-01"})
        self.holiday_cache.clear()
        self.assertIsNone(self.holiday_cache.get(2024, 1))
        self.assertEqual(other.get(2024, 1), {"2024-01-01"})


class HolidayCalendarTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.client = FakeWorklogClient(months={(2024, 1): month_payload(date(2024, 1, 26))})
        self.calendar = HolidayCalendar(self.client)

    def test_holidays_are_read_through_once_per_month(self):
        self.assertTrue(self.calendar.is_holiday(date(2024, 1, 26)))
        self.assertFalse(self.calendar.is_holiday(date(2024, 1, 25)))
        self.assertEqual(len(self.client.calls_of("monthly")), 1)

    def test_invalidation_forces_a_refetch(self):
        self.calendar.is_holiday(date(2024, 1, 26))
        self.calendar.invalidate(2024, 1)
        self.calendar.is_holiday(date(2024, 1, 26))
        self.assertEqual(len(self.client.calls_of("monthly")), 2)

    def test_upstream_failure_reads_as_no_holidays_and_is_not_cached(self):
        self.client.months[(2024, 3)] = server_error()
        self.assertFalse(self.calendar.is_holiday(date(2024, 3, 5)))
        self.client.months[(2024, 3)] = month_payload(date(2024, 3, 5))
        self.assertTrue(self.calendar.is_holiday(date(2024, 3, 5)))

    def test_comp_off_eligibility(self):
        # Sunday and 2nd Saturday need no holiday lookup.
        self.assertTrue(self.calendar.is_comp_off_eligible(date(2024, 1, 14)))
        self.assertTrue(self.calendar.is_comp_off_eligible(date(2024, 1, 13)))
        self.assertEqual(self.client.calls_of("monthly"), [])
        # Friday holiday vs ordinary Thursday.
        self.assertTrue(self.calendar.is_comp_off_eligible(date(2024, 1, 26)))
        self.assertFalse(self.calendar.is_comp_off_eligible(date(2024, 1, 25)))
        # 1st Saturday is a working day.
        self.assertFalse(self.calendar.is_comp_off_eligible(date(2024, 1, 6)))
