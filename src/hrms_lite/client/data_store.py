"""In-memory mirror of employees and today's attendance for front-ends.

State flows one way: every mutation goes through the API, replaces the state
snapshot and publishes it to subscribers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Optional

import requests

from ..common.datetime_utils import today_local
from ..common.logger import get_logger
from .api_client import HrmsApiClient
from .resilience import ApiError

log = get_logger("client")

Listener = Callable[["StoreState"], None]

SAMPLE_EMPLOYEES = (
    {"id": 1, "employeeCode": "EMP001", "name": "John Doe", "email": "john.doe@company.com", "department": "Engineering"},
    {"id": 2, "employeeCode": "EMP002", "name": "Jane Smith", "email": "jane.smith@company.com", "department": "Marketing"},
    {"id": 3, "employeeCode": "EMP003", "name": "Mike Johnson", "email": "mike.johnson@company.com", "department": "Sales"},
    {"id": 4, "employeeCode": "EMP004", "name": "Sarah Williams", "email": "sarah.williams@company.com", "department": "HR"},
    {"id": 5, "employeeCode": "EMP005", "name": "David Brown", "email": "david.brown@company.com", "department": "Engineering"},
    {"id": 6, "employeeCode": "EMP006", "name": "Lisa Anderson", "email": "lisa.anderson@company.com", "department": "Finance"},
)

_SAMPLE_ABSENT = {"EMP003", "EMP005"}


def sample_attendance(day: date) -> tuple[dict, ...]:
    return tuple(
        {
            "id": f"sample-{e['id']}-{day.isoformat()}",
            "employeeId": e["id"],
            "employeeCode": e["employeeCode"],
            "employeeName": e["name"],
            "department": e["department"],
            "date": day.isoformat(),
            "status": "Absent" if e["employeeCode"] in _SAMPLE_ABSENT else "Present",
        }
        for e in SAMPLE_EMPLOYEES
    )


@dataclass(frozen=True)
class StoreState:
    employees: tuple = ()
    attendance: tuple = ()
    is_loading: bool = False
    is_fallback: bool = False


class DataStore:
    def __init__(self, client: HrmsApiClient, *, today: Optional[Callable[[], date]] = None):
        self._client = client
        self._today = today or today_local
        self._state = StoreState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> StoreState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: StoreState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def load(self) -> StoreState:
        """Initial load; falls back to the sample dataset when the API is unreachable."""
        self._publish(replace(self._state, is_loading=True))
        try:
            employees = self._client.get_employees(limit=100).data or []
            attendance = self._client.get_today_attendance().data or []
            state = StoreState(employees=tuple(employees), attendance=tuple(attendance))
        except (ApiError, requests.RequestException) as e:
            log.warning("API unavailable, using fallback data: %s", e)
            state = StoreState(
                employees=SAMPLE_EMPLOYEES,
                attendance=sample_attendance(self._today()),
                is_fallback=True,
            )
        self._publish(state)
        return state

    def refresh_employees(self) -> None:
        try:
            employees = self._client.get_employees(limit=100).data or []
        except (ApiError, requests.RequestException) as e:
            log.warning("Failed to refresh employees, keeping current data: %s", e)
            return
        self._publish(replace(self._state, employees=tuple(employees), is_fallback=False))

    def refresh_attendance(self) -> None:
        try:
            attendance = self._client.get_today_attendance().data or []
        except (ApiError, requests.RequestException) as e:
            log.warning("Failed to refresh attendance, keeping current data: %s", e)
            return
        self._publish(replace(self._state, attendance=tuple(attendance), is_fallback=False))

    def add_employee(self, payload: dict) -> dict:
        employee = self._client.create_employee(payload).data
        self._publish(replace(self._state, employees=self._state.employees + (employee,)))
        return employee

    def delete_employee(self, employee_id: int) -> None:
        self._client.delete_employee(employee_id)
        self._publish(
            replace(
                self._state,
                employees=tuple(e for e in self._state.employees if e.get("id") != employee_id),
                attendance=tuple(a for a in self._state.attendance if a.get("employeeId") != employee_id),
            )
        )

    def mark_attendance(self, *, employee_id: int, day: str, status: str) -> dict:
        record = self._client.mark_attendance(employee_id=employee_id, date=day, status=status).data
        others = tuple(
            a
            for a in self._state.attendance
            if not (a.get("employeeId") == record.get("employeeId") and a.get("date") == record.get("date"))
        )
        self._publish(replace(self._state, attendance=others + (record,)))
        return record

    def todays_attendance(self) -> list[dict]:
        today = self._today().isoformat()
        return [a for a in self._state.attendance if str(a.get("date", "")).startswith(today)]
