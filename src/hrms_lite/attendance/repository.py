from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.pagination import PageRequest
from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceRecord, StatusCountRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        marked_at: datetime,
    ) -> tuple[int, bool]:
        """Insert the (employee, day) record or overwrite its status in one atomic step.

        Returns ``(attendance_id, created)``. Must never leave two rows for the
        same employee and day, even under concurrent calls.
        """
        raise NotImplementedError

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, marked_at: datetime) -> bool:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def delete_for_employee(self, employee_id: int) -> int:
        raise NotImplementedError

    def list_page(self, flt: AttendanceFilter, page: PageRequest) -> tuple[Sequence[AttendanceRecord], int]:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records with ``start <= work_date < end``, most recently created first."""
        raise NotImplementedError

    def count_by_status(self, flt: AttendanceFilter) -> dict[AttendanceStatus, int]:
        raise NotImplementedError

    def count_by_employee_and_status(self, flt: AttendanceFilter) -> Sequence[StatusCountRow]:
        raise NotImplementedError
