from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, Department


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's status on one day.

    Employee display fields are joined in by the repository for listings.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    marked_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee_code: Optional[str] = None
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    department: Optional[Department] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "employeeCode": self.employee_code,
            "employeeName": self.employee_name,
            "employeeEmail": self.employee_email,
            "department": self.department.value if self.department else None,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
            "markedAt": self.marked_at.isoformat(),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    created: bool


@dataclass(frozen=True)
class AttendanceFilter:
    """Filter for listings and statistics.

    ``end_date`` is exclusive; callers turn an inclusive end day into
    ``end + 1 day``.
    """

    employee_id: Optional[int] = None
    status: Optional[AttendanceStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class StatusCountRow:
    """Read-model: count of one status for one employee (grouped query)."""

    employee_id: int
    employee_code: str
    name: str
    department: Department
    status: AttendanceStatus
    count: int
