import hashlib
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings

from .payloads import LeaveRequest, TimesheetDay, parse_leave_requests, unwrap_object

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINTS = {
    "timesheet_by_date": "/v1/timesheets/by-date",
    "leave_requests": "/v1/leaves/requests",
    "monthly_timesheet": "/v1/timesheets/monthly",
    "leave_application": "/v1/leaves/application",
    "timesheet_entries": "/v1/activities/submit",
    "compoff_request": "/v1/compoff/request",
}


class UpstreamApiError(Exception):
    def __init__(self, message: str, *, status_code: Optional[int] = None, code: str = "", payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code or ""
        self.payload = payload

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def upstream_message(self) -> str:
        if isinstance(self.payload, dict):
            message = self.payload.get("message") or self.payload.get("detail")
            if message:
                return str(message)
        return str(self)


class WorklogApiClient:
    """
    Thin JSON client for the timesheet / leave backend.

    The caller's ``Authorization`` header value is forwarded verbatim; token
    refresh is the caller's concern.
    """

    def __init__(self, base_url: Optional[str] = None, authorization: str = "", session=None, timeout=None):
        self.base_url = base_url or getattr(settings, "UPSTREAM_API_BASE_URL", "http://localhost:8000")
        self.authorization = authorization or ""
        self.session = session or requests.Session()
        self.timeout = timeout or getattr(settings, "UPSTREAM_API_TIMEOUT", 10)
        self.endpoints = {**DEFAULT_ENDPOINTS, **getattr(settings, "UPSTREAM_API_ENDPOINTS", {})}

    def _build_url(self, path: str) -> str:
        base = (self.base_url or "").rstrip("/")
        path = (path or "").lstrip("/")
        if not path:
            return base
        return f"{base}/{path}"

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = self._build_url(self.endpoints[endpoint])
        headers = {"Accept": "application/json"}
        if self.authorization:
            headers["Authorization"] = self.authorization
        try:
            response = self.session.request(
                method=method.upper(),
                url=url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamApiError(f"Upstream request failed: {exc}") from exc

        payload = {}
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = {"raw": response.text}

        if response.status_code >= 400:
            code = ""
            if isinstance(payload, dict):
                code = payload.get("code") or payload.get("errorCode") or payload.get("error_code") or ""
            raise UpstreamApiError(
                f"Upstream {endpoint} request failed with status {response.status_code}.",
                status_code=response.status_code,
                code=code,
                payload=payload,
            )

        logger.debug("Upstream %s %s -> %s", method.upper(), url, response.status_code)
        return payload

    def get_timesheet_for_date(self, work_date: date) -> TimesheetDay:
        payload = self._request("get", "timesheet_by_date", params={"workDate": work_date.isoformat()})
        return TimesheetDay.from_payload(work_date, payload)

    def get_leave_requests(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[LeaveRequest]:
        params = {}
        if start_date:
            params["startDate"] = start_date.isoformat()
        if end_date:
            params["endDate"] = end_date.isoformat()
        payload = self._request("get", "leave_requests", params=params or None)
        return parse_leave_requests(payload)

    def get_monthly_timesheet(self, year: int, month: int) -> dict:
        payload = self._request("get", "monthly_timesheet", params={"year": year, "month": month})
        return unwrap_object(payload, "days")

    def submit_leave_application(self, payload: dict) -> Any:
        return self._request("post", "leave_application", json=payload)

    def submit_timesheet_entries(self, payload: dict) -> Any:
        return self._request("post", "timesheet_entries", json=payload)

    def submit_comp_off_request(self, payload: dict) -> Any:
        return self._request("post", "compoff_request", json=payload)


def get_upstream_client(request) -> WorklogApiClient:
    """Build a client that acts on behalf of the caller of ``request``."""
    authorization = request.META.get("HTTP_AUTHORIZATION", "")
    return WorklogApiClient(authorization=authorization)


def caller_key(request) -> str:
    """Stable, non-reversible id for the caller's credentials, used to scope per-caller state."""
    authorization = request.META.get("HTTP_AUTHORIZATION", "")
    return hashlib.sha256(authorization.encode("utf-8")).hexdigest()[:32]
