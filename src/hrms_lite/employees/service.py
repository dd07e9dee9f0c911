from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..attendance.model import AttendanceFilter
from ..attendance.repository import AttendanceRepository
from ..common.logger import get_logger
from ..common.pagination import Page, Pagination
from ..common.query import page_request
from ..common.validators import require_id, validate
from ..core.constants import EMPLOYEE_CODE_DIGITS, EMPLOYEE_CODE_PREFIX, EMPLOYEE_CODE_RETRIES
from ..core.exceptions import ConflictError, NotFoundError
from ..stats.aggregation import status_totals
from .model import Employee, EmployeeFilter
from .repository import EmployeeRepository
from .schemas import EMPLOYEE_CREATE, EMPLOYEE_QUERY, EMPLOYEE_UPDATE

log = get_logger("employees")

_FIELD_TO_COLUMN = {
    "employeeCode": "employee_code",
    "name": "name",
    "email": "email",
    "department": "department",
}


def format_employee_code(number: int) -> str:
    return f"{EMPLOYEE_CODE_PREFIX}{number:0{EMPLOYEE_CODE_DIGITS}d}"


@dataclass(frozen=True)
class EmployeeSummary:
    employee: Employee
    attendance_stats: dict

    def to_dict(self) -> dict:
        return {**self.employee.to_dict(), "attendanceStats": self.attendance_stats}


class EmployeeService:
    """Use cases: manage employees."""

    def __init__(self, employees: EmployeeRepository, attendance: AttendanceRepository):
        self._employees = employees
        self._attendance = attendance

    def list(self, query: Optional[Mapping[str, Any]] = None) -> Page:
        values = validate(query, EMPLOYEE_QUERY)
        request = page_request(values)
        flt = EmployeeFilter(department=values.get("department"), search=values.get("search"))

        items, total = self._employees.list_page(flt, request)
        return Page(items=list(items), pagination=Pagination.build(request, total))

    def get(self, employee_id: Any) -> Employee:
        employee = self._employees.get_by_id(require_id(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_summary(self, employee_id: Any) -> EmployeeSummary:
        employee = self.get(employee_id)
        counts = self._attendance.count_by_status(AttendanceFilter(employee_id=employee.employee_id))
        return EmployeeSummary(employee=employee, attendance_stats=status_totals(counts))

    def _next_code(self) -> str:
        return format_employee_code(self._employees.max_code_number() + 1)

    def create(self, payload: Optional[Mapping[str, Any]]) -> Employee:
        values = validate(payload, EMPLOYEE_CREATE)
        code: Optional[str] = values.get("employeeCode")

        if code and self._employees.get_by_code(code):
            raise ConflictError(f"Employee ID '{code}' already exists", field="employeeCode")
        if self._employees.get_by_email(values["email"]):
            raise ConflictError(f"Email address '{values['email']}' is already registered", field="email")

        attempts = 1 if code else EMPLOYEE_CODE_RETRIES
        for attempt in range(1, attempts + 1):
            employee_code = code or self._next_code()
            try:
                employee_id = self._employees.create(
                    employee_code=employee_code,
                    name=values["name"],
                    email=values["email"],
                    department=values["department"],
                )
                break
            except ConflictError as e:
                # Another request took the generated code; pick the next one.
                if code or e.field != "employeeCode" or attempt == attempts:
                    raise
                log.warning("Generated employee code %s already taken, retrying", employee_code)

        log.info("Created employee %s (id=%s)", employee_code, employee_id)
        return self.get(employee_id)

    def update(self, employee_id: Any, payload: Optional[Mapping[str, Any]]) -> Employee:
        current = self.get(employee_id)
        values = validate(payload, EMPLOYEE_UPDATE)

        code = values.get("employeeCode")
        if code and code != current.employee_code:
            other = self._employees.get_by_code(code)
            if other and other.employee_id != current.employee_id:
                raise ConflictError(f"Employee ID '{code}' already exists", field="employeeCode")

        email = values.get("email")
        if email and email != current.email:
            other = self._employees.get_by_email(email)
            if other and other.employee_id != current.employee_id:
                raise ConflictError(f"Email address '{email}' is already registered", field="email")

        changes = {_FIELD_TO_COLUMN[k]: v for k, v in values.items() if k in _FIELD_TO_COLUMN}
        self._employees.update(current.employee_id, changes)
        return self.get(current.employee_id)

    def delete(self, employee_id: Any) -> int:
        """Delete the employee and every attendance record referencing it.

        Returns the number of attendance records removed.
        """
        employee = self.get(employee_id)
        removed = self._attendance.delete_for_employee(employee.employee_id)
        if not self._employees.delete_by_id(employee.employee_id):
            raise NotFoundError("Employee not found")

        log.info("Deleted employee %s with %d attendance records", employee.employee_code, removed)
        return removed
