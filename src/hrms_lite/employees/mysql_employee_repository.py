from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.pagination import PageRequest
from ..core.constants import EMPLOYEE_CODE_PREFIX
from ..core.enums import Department
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_name, fetchall, fetchone, like_pattern
from .model import DepartmentCount, Employee, EmployeeFilter
from .repository import EmployeeRepository

_COLUMNS = "employee_id, employee_code, name, email, department, created_at, updated_at"

_UPDATABLE = ("employee_code", "name", "email", "department")


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        name=r["name"],
        email=r["email"],
        department=Department(r["department"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _conflict_from(err: IntegrityError, *, employee_code: Optional[str], email: Optional[str]) -> Optional[ConflictError]:
    key = duplicate_key_name(err)
    if key is None:
        return None
    if key == "uq_employees_email":
        return ConflictError(f"Email address '{email}' is already registered", field="email")
    return ConflictError(f"Employee ID '{employee_code}' already exists", field="employeeCode")


def _where(flt: EmployeeFilter) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if flt.department is not None:
        clauses.append("department=%s")
        params.append(flt.department.value)
    if flt.search:
        pattern = like_pattern(flt.search)
        clauses.append("(LOWER(name) LIKE %s OR LOWER(employee_code) LIKE %s OR LOWER(email) LIKE %s)")
        params.extend([pattern, pattern, pattern])

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: object) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("employee_id", int(employee_id))

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return self._get_one("employee_code", employee_code)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("email", email.lower())

    def list_page(self, flt: EmployeeFilter, page: PageRequest) -> tuple[Sequence[Employee], int]:
        where, params = _where(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM employees {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                {where}
                ORDER BY created_at DESC, employee_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(page.limit), int(page.offset)]),
            )
            return [_row_to_employee(r) for r in fetchall(cur)], total

    def max_code_number(self) -> int:
        prefix_len = len(EMPLOYEE_CODE_PREFIX)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(MAX(CAST(SUBSTRING(employee_code, %s) AS UNSIGNED)), 0) AS max_number
                FROM employees
                WHERE employee_code LIKE %s
                """,
                (prefix_len + 1, f"{EMPLOYEE_CODE_PREFIX}%"),
            )
            row = fetchone(cur)
            return int(row["max_number"]) if row else 0

    def create(self, *, employee_code: str, name: str, email: str, department: Department) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(employee_code, name, email, department)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (employee_code, name, email.lower(), department.value),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            conflict = _conflict_from(e, employee_code=employee_code, email=email)
            if conflict:
                raise conflict from e
            raise

    def update(self, employee_id: int, changes: dict) -> bool:
        columns = [c for c in _UPDATABLE if c in changes]
        if not columns:
            return True

        params: list[object] = []
        for c in columns:
            value = changes[c]
            if isinstance(value, Department):
                value = value.value
            elif c == "email":
                value = str(value).lower()
            params.append(value)
        params.append(int(employee_id))

        assignments = ", ".join(f"{c}=%s" for c in columns)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE employees SET {assignments} WHERE employee_id=%s", tuple(params))
                # rowcount is 0 when values are unchanged; existence is checked by the service.
                return cur.rowcount >= 0
        except IntegrityError as e:
            conflict = _conflict_from(e, employee_code=changes.get("employee_code"), email=changes.get("email"))
            if conflict:
                raise conflict from e
            raise

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM employees")
            return int(fetchone(cur)["total"])

    def count_by_department(self) -> Sequence[DepartmentCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT department, COUNT(*) AS total
                FROM employees
                GROUP BY department
                ORDER BY total DESC, department
                """
            )
            return [
                DepartmentCount(department=Department(r["department"]), count=int(r["total"]))
                for r in fetchall(cur)
            ]
