from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import day_window, now_local
from ..common.logger import get_logger
from ..common.pagination import Page, Pagination
from ..common.query import page_request
from ..common.validators import require_id, validate
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from .filters import date_range_filter
from .model import AttendanceRecord, MarkResult
from .repository import AttendanceRepository
from .schemas import ATTENDANCE_QUERY, ATTENDANCE_UPDATE, attendance_mark_schema

log = get_logger("attendance")


class AttendanceService:
    """Use cases: mark, correct and list daily attendance.

    Attendance is a function of (employee, day): marking the same day again
    overwrites the status instead of adding a row.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._now = now or now_local

    def _today(self) -> date:
        return self._now().date()

    def reconcile(self, *, employee_id: int, work_date: date | datetime, status: AttendanceStatus) -> MarkResult:
        """Create or overwrite the record for ``employee_id`` on ``work_date``'s calendar day."""
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        day = work_date.date() if isinstance(work_date, datetime) else work_date
        attendance_id, created = self._attendance.upsert(
            employee_id=employee_id,
            work_date=day,
            status=status,
            marked_at=self._now(),
        )

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            # Deleted between the write and the read (e.g. employee removed).
            raise NotFoundError("Attendance record not found")

        log.info(
            "%s attendance employee=%s date=%s status=%s",
            "Created" if created else "Updated",
            employee_id,
            day.isoformat(),
            status.value,
        )
        return MarkResult(record=record, created=created)

    def mark(self, payload: Optional[Mapping[str, Any]]) -> MarkResult:
        values = validate(payload, attendance_mark_schema(self._today))
        return self.reconcile(employee_id=values["employeeId"], work_date=values["date"], status=values["status"])

    def get(self, attendance_id: Any) -> AttendanceRecord:
        record = self._attendance.get_by_id(require_id(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def update_status(self, attendance_id: Any, payload: Optional[Mapping[str, Any]]) -> AttendanceRecord:
        record = self.get(attendance_id)
        values = validate(payload, ATTENDANCE_UPDATE)

        if not self._attendance.update_status(
            attendance_id=record.attendance_id,
            status=values["status"],
            marked_at=self._now(),
        ):
            raise NotFoundError("Attendance record not found")
        return self.get(record.attendance_id)

    def delete(self, attendance_id: Any) -> None:
        record = self.get(attendance_id)
        if not self._attendance.delete_by_id(record.attendance_id):
            raise NotFoundError("Attendance record not found")

    def list(self, query: Optional[Mapping[str, Any]] = None) -> Page:
        values = validate(query, ATTENDANCE_QUERY)
        request = page_request(values)
        flt = date_range_filter(values, employee_id=values.get("employeeId"), status=values.get("status"))

        items, total = self._attendance.list_page(flt, request)
        return Page(items=list(items), pagination=Pagination.build(request, total))

    def today(self) -> Sequence[AttendanceRecord]:
        start, end = day_window(self._today())
        return self._attendance.list_between(start, end)
