from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.pagination import PageRequest
from ..core.enums import Department
from .model import DepartmentCount, Employee, EmployeeFilter


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Services depend on this interface, not on a concrete database.
    Implementations raise ``ConflictError`` (with ``field`` set to
    ``employeeCode`` or ``email``) when a unique key is violated.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_page(self, flt: EmployeeFilter, page: PageRequest) -> tuple[Sequence[Employee], int]:
        """Return one page of matching employees (newest first) and the total match count."""
        raise NotImplementedError

    def max_code_number(self) -> int:
        """Highest numeric suffix among existing employee codes, 0 when there are none."""
        raise NotImplementedError

    def create(self, *, employee_code: str, name: str, email: str, department: Department) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, changes: dict) -> bool:
        """Apply ``changes`` (keys: employee_code, name, email, department)."""
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def count_by_department(self) -> Sequence[DepartmentCount]:
        raise NotImplementedError
