import logging
from datetime import date
from typing import Iterable, Optional, Set

from django.conf import settings
from django.core.cache import cache

from upstream.client import UpstreamApiError
from upstream.payloads import parse_holiday_dates

from .rules import is_non_working_day, months_spanned

logger = logging.getLogger(__name__)


class MonthlyHolidayCache:
    """
    Holiday dates per (year, month), kept in the Django cache.

    Entries are a read-through optimisation only; any code path that mutates a
    leave or timesheet must call ``invalidate`` for every month it touches.
    """

    def __init__(self, cache_backend=None, namespace: str = "default", timeout: Optional[int] = None):
        self.cache = cache_backend or cache
        self.namespace = namespace
        self.timeout = timeout if timeout is not None else getattr(settings, "HOLIDAY_CACHE_TIMEOUT", 6 * 60 * 60)

    def _version_key(self) -> str:
        return f"workcalendar:holidays:{self.namespace}:version"

    def _version(self) -> int:
        return int(self.cache.get(self._version_key()) or 0)

    def _key(self, year: int, month: int) -> str:
        return f"workcalendar:holidays:{self.namespace}:v{self._version()}:{year}-{month}"

    def get(self, year: int, month: int) -> Optional[Set[str]]:
        data = self.cache.get(self._key(year, month))
        if data is None:
            return None
        return set(data)

    def set(self, year: int, month: int, holidays: Iterable[str]):
        self.cache.set(self._key(year, month), sorted(holidays), timeout=self.timeout)

    def invalidate(self, year: int, month: int):
        self.cache.delete(self._key(year, month))
        logger.debug("Invalidated holiday cache for %s-%02d (%s)", year, month, self.namespace)

    def invalidate_range(self, start: date, end: date):
        for year, month in months_spanned(start, end):
            self.invalidate(year, month)

    def clear(self):
        """Drop every month at once by moving to a fresh key version."""
        key = self._version_key()
        self.cache.set(key, self._version() + 1, timeout=None)


class HolidayCalendar:
    """Read-through holiday lookups on top of the monthly-timesheet endpoint."""

    def __init__(self, client, holiday_cache: Optional[MonthlyHolidayCache] = None):
        self.client = client
        self.holiday_cache = holiday_cache or MonthlyHolidayCache()

    def holidays_for_month(self, year: int, month: int) -> Set[str]:
        cached = self.holiday_cache.get(year, month)
        if cached is not None:
            return cached
        try:
            payload = self.client.get_monthly_timesheet(year, month)
        except UpstreamApiError as exc:
            # Failures are not cached so the next read retries.
            logger.warning("Could not load holidays for %s-%02d: %s", year, month, exc)
            return set()
        holidays = parse_holiday_dates(payload)
        self.holiday_cache.set(year, month, holidays)
        return holidays

    def is_holiday(self, day: date) -> bool:
        return day.isoformat() in self.holidays_for_month(day.year, day.month)

    def is_comp_off_eligible(self, day: date) -> bool:
        if is_non_working_day(day):
            return True
        return self.is_holiday(day)

    def invalidate(self, year: int, month: int):
        self.holiday_cache.invalidate(year, month)

    def invalidate_range(self, start: date, end: date):
        self.holiday_cache.invalidate_range(start, end)
