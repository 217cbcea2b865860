from datetime import date, timedelta

from django.test import SimpleTestCase

from workcalendar.rules import (
    day_of_week,
    is_non_working_day,
    iter_days,
    month_days,
    months_spanned,
    non_working_days_in_month,
    non_working_reason,
    week_of_month,
)


class NonWorkingDayRuleTests(SimpleTestCase):
    def _every_day(self, start=date(2023, 1, 1), end=date(2025, 12, 31)):
        return iter_days(start, end)

    def test_day_of_week_counts_from_sunday(self):
        self.assertEqual(day_of_week(date(2024, 6, 2)), 0)  # Sunday
        self.assertEqual(day_of_week(date(2024, 6, 3)), 1)  # Monday
        self.assertEqual(day_of_week(date(2024, 6, 1)), 6)  # Saturday

    def test_week_of_month_is_ceil_of_day_over_seven(self):
        self.assertEqual(week_of_month(date(2024, 6, 1)), 1)
        self.assertEqual(week_of_month(date(2024, 6, 7)), 1)
        self.assertEqual(week_of_month(date(2024, 6, 8)), 2)
        self.assertEqual(week_of_month(date(2024, 6, 14)), 2)
        self.assertEqual(week_of_month(date(2024, 6, 28)), 4)
        self.assertEqual(week_of_month(date(2024, 6, 29)), 5)

    def test_every_sunday_is_non_working(self):
        for day in self._every_day():
            if day_of_week(day) == 0:
                self.assertTrue(is_non_working_day(day), day)

    def test_saturdays_follow_second_and_fourth_week(self):
        for day in self._every_day():
            if day_of_week(day) != 6:
                continue
            expected = 8 <= day.day <= 14 or 22 <= day.day <= 28
            self.assertEqual(is_non_working_day(day), expected, day)

    def test_weekdays_are_working(self):
        for day in self._every_day():
            if 1 <= day_of_week(day) <= 5:
                self.assertFalse(is_non_working_day(day), day)

    def test_rule_is_deterministic(self):
        for day in self._every_day(date(2024, 1, 1), date(2024, 3, 31)):
            self.assertEqual(is_non_working_day(day), is_non_working_day(day))

    def test_saturday_edges_of_september_2024(self):
        # September 2024 starts on a Sunday.
        self.assertFalse(is_non_working_day(date(2024, 9, 7)))
        self.assertTrue(is_non_working_day(date(2024, 9, 14)))
        self.assertFalse(is_non_working_day(date(2024, 9, 21)))
        self.assertTrue(is_non_working_day(date(2024, 9, 28)))

    def test_reason_labels(self):
        self.assertEqual(non_working_reason(date(2024, 6, 2)), "Sunday")
        self.assertEqual(non_working_reason(date(2024, 6, 8)), "2nd/4th Saturday")
        self.assertIsNone(non_working_reason(date(2024, 6, 1)))
        self.assertIsNone(non_working_reason(date(2024, 6, 4)))

    def test_non_working_days_in_june_2024(self):
        self.assertEqual(
            non_working_days_in_month(2024, 6),
            [
                date(2024, 6, 2),
                date(2024, 6, 8),
                date(2024, 6, 9),
                date(2024, 6, 16),
                date(2024, 6, 22),
                date(2024, 6, 23),
                date(2024, 6, 30),
            ],
        )


class DateRangeHelperTests(SimpleTestCase):
    def test_iter_days_is_inclusive(self):
        days = list(iter_days(date(2024, 2, 28), date(2024, 3, 1)))
        self.assertEqual(days, [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)])
        self.assertEqual(list(iter_days(date(2024, 3, 2), date(2024, 3, 1))), [])

    def test_month_days_handles_leap_years(self):
        self.assertEqual(len(month_days(2024, 2)), 29)
        self.assertEqual(len(month_days(2023, 2)), 28)
        self.assertEqual(month_days(2024, 12)[-1], date(2024, 12, 31))

    def test_months_spanned_crosses_year_end(self):
        self.assertEqual(months_spanned(date(2024, 12, 30), date(2025, 2, 1)), [(2024, 12), (2025, 1), (2025, 2)])
        self.assertEqual(months_spanned(date(2024, 3, 5), date(2024, 3, 5)), [(2024, 3)])
        start = date(2024, 1, 31)
        self.assertEqual(months_spanned(start, start + timedelta(days=1)), [(2024, 1), (2024, 2)])
