from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

import requests

from ..common.logger import get_logger
from .resilience import (
    DEFAULT_RETRY_DELAYS,
    UNAVAILABLE_STATUSES,
    WAKEUP_INTERVAL_SECONDS,
    ApiError,
    TransientError,
    resilient,
)

log = get_logger("client")


@dataclass(frozen=True)
class ApiResponse:
    success: bool
    data: Any = None
    message: Optional[str] = None
    errors: list = field(default_factory=list)
    pagination: Optional[dict] = None


def _clean(params: dict) -> dict:
    return {k: v for k, v in params.items() if v is not None and v != ""}


class HrmsApiClient:
    """HTTP client for the HRMS Lite API.

    ``base_url`` points at the API root, e.g. ``http://localhost:5001/api``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        retry_delays: Sequence[float] = DEFAULT_RETRY_DELAYS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.retry_delays = tuple(retry_delays)
        self._sleep = sleep
        self._clock = clock
        self._last_wakeup: Optional[float] = None

    @property
    def health_url(self) -> str:
        root = self.base_url[: -len("/api")] if self.base_url.endswith("/api") else self.base_url
        return f"{root}/health"

    def sleep(self, seconds: float) -> None:
        self._sleep(seconds)

    def wake_up(self) -> None:
        """Ping the health endpoint, at most once per minute."""
        now = self._clock()
        if self._last_wakeup is not None and now - self._last_wakeup < WAKEUP_INTERVAL_SECONDS:
            return
        self._last_wakeup = now

        try:
            resp = self.session.get(self.health_url, headers={"Cache-Control": "no-cache"}, timeout=self.timeout)
            if resp.ok:
                log.info("Backend service is awake")
            else:
                log.info("Backend service is starting up (status %s)", resp.status_code)
        except requests.RequestException as e:
            log.info("Backend service is starting up (%s)", e)

    @resilient
    def request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> ApiResponse:
        resp = self.session.request(
            method,
            f"{self.base_url}{path}",
            params=_clean(params or {}),
            json=json,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )

        if resp.status_code in UNAVAILABLE_STATUSES:
            raise TransientError(f"HTTP {resp.status_code}", status=resp.status_code)

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not resp.ok or not body.get("success", False):
            raise ApiError(
                body.get("message") or f"HTTP error! status: {resp.status_code}",
                status=resp.status_code,
                errors=body.get("errors"),
            )

        return ApiResponse(
            success=True,
            data=body.get("data"),
            message=body.get("message"),
            pagination=body.get("pagination"),
        )

    # Employees

    def get_employees(
        self,
        *,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> ApiResponse:
        return self.request(
            "GET",
            "/employees",
            params={"page": page, "limit": limit, "department": department, "search": search},
        )

    def get_employee(self, employee_id: int) -> ApiResponse:
        return self.request("GET", f"/employees/{employee_id}")

    def create_employee(self, payload: dict) -> ApiResponse:
        return self.request("POST", "/employees", json=payload)

    def update_employee(self, employee_id: int, payload: dict) -> ApiResponse:
        return self.request("PUT", f"/employees/{employee_id}", json=payload)

    def delete_employee(self, employee_id: int) -> ApiResponse:
        return self.request("DELETE", f"/employees/{employee_id}")

    def get_employee_stats(self) -> ApiResponse:
        return self.request("GET", "/employees/stats")

    # Attendance

    def get_attendance(
        self,
        *,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        employee_id: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        status: Optional[str] = None,
    ) -> ApiResponse:
        return self.request(
            "GET",
            "/attendance",
            params={
                "page": page,
                "limit": limit,
                "employeeId": employee_id,
                "startDate": start_date,
                "endDate": end_date,
                "status": status,
            },
        )

    def get_attendance_record(self, attendance_id: int) -> ApiResponse:
        return self.request("GET", f"/attendance/{attendance_id}")

    def mark_attendance(self, *, employee_id: int, date: str, status: str) -> ApiResponse:
        return self.request("POST", "/attendance", json={"employeeId": employee_id, "date": date, "status": status})

    def update_attendance(self, attendance_id: int, status: str) -> ApiResponse:
        return self.request("PUT", f"/attendance/{attendance_id}", json={"status": status})

    def delete_attendance(self, attendance_id: int) -> ApiResponse:
        return self.request("DELETE", f"/attendance/{attendance_id}")

    def get_attendance_stats(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> ApiResponse:
        return self.request(
            "GET",
            "/attendance/stats",
            params={"startDate": start_date, "endDate": end_date, "employeeId": employee_id},
        )

    def get_today_attendance(self) -> ApiResponse:
        return self.request("GET", "/attendance/today")
