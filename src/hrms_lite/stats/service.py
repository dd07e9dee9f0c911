from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping, Optional

from ..attendance.filters import date_range_filter
from ..attendance.model import AttendanceFilter
from ..attendance.repository import AttendanceRepository
from ..attendance.schemas import ATTENDANCE_STATS_QUERY
from ..common.datetime_utils import day_window, today_local
from ..common.validators import validate
from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository
from .aggregation import by_employee, overall_from_rows


@dataclass(frozen=True)
class AttendanceStats:
    overall: dict
    by_employee: list[dict]

    def to_dict(self) -> dict:
        return {"overall": self.overall, "byEmployee": self.by_employee}


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    present_today: int
    absent_today: int
    department_breakdown: list[dict]

    def to_dict(self) -> dict:
        return {
            "totalEmployees": self.total_employees,
            "presentToday": self.present_today,
            "absentToday": self.absent_today,
            "departmentBreakdown": self.department_breakdown,
        }


class StatsService:
    """Use cases: attendance aggregates and dashboard counters."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        today: Optional[Callable[[], date]] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._today = today or today_local

    def attendance_stats(self, query: Optional[Mapping[str, Any]] = None) -> AttendanceStats:
        values = validate(query, ATTENDANCE_STATS_QUERY)
        flt = date_range_filter(values, employee_id=values.get("employeeId"))

        rows = self._attendance.count_by_employee_and_status(flt)
        return AttendanceStats(overall=overall_from_rows(rows), by_employee=by_employee(rows))

    def dashboard(self) -> DashboardStats:
        start, end = day_window(self._today())
        counts = self._attendance.count_by_status(AttendanceFilter(start_date=start, end_date=end))

        return DashboardStats(
            total_employees=self._employees.count(),
            present_today=counts.get(AttendanceStatus.PRESENT, 0),
            absent_today=counts.get(AttendanceStatus.ABSENT, 0),
            department_breakdown=[
                {"department": d.department.value, "count": d.count} for d in self._employees.count_by_department()
            ],
        )
