from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Department


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Plain data object; no database access here.
    """

    employee_id: int
    employee_code: str
    name: str
    email: str
    department: Department
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "employeeCode": self.employee_code,
            "name": self.name,
            "email": self.email,
            "department": self.department.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class EmployeeFilter:
    department: Optional[Department] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class DepartmentCount:
    department: Department
    count: int
