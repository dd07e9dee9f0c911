from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..common.pagination import PageRequest
from ..core.enums import AttendanceStatus, Department
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceFilter, AttendanceRecord, StatusCountRow
from .repository import AttendanceRepository

_SELECT = """
    SELECT ar.attendance_id, ar.employee_id, ar.work_date, ar.status, ar.marked_at,
           ar.created_at, ar.updated_at,
           e.employee_code, e.name AS employee_name, e.email AS employee_email, e.department
    FROM attendance_records ar
    JOIN employees e ON e.employee_id = ar.employee_id
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        marked_at=r["marked_at"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_code=r.get("employee_code"),
        employee_name=r.get("employee_name"),
        employee_email=r.get("employee_email"),
        department=Department(r["department"]) if r.get("department") else None,
    )


def _where(flt: AttendanceFilter) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if flt.employee_id is not None:
        clauses.append("ar.employee_id=%s")
        params.append(int(flt.employee_id))
    if flt.status is not None:
        clauses.append("ar.status=%s")
        params.append(flt.status.value)
    if flt.start_date is not None:
        clauses.append("ar.work_date >= %s")
        params.append(flt.start_date)
    if flt.end_date is not None:
        clauses.append("ar.work_date < %s")
        params.append(flt.end_date)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE ar.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def upsert(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        marked_at: datetime,
    ) -> tuple[int, bool]:
        # uq_attendance_employee_date decides between insert and update inside
        # one statement; LAST_INSERT_ID(expr) exposes the existing row id.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, status, marked_at)
                    VALUES(%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        status=VALUES(status),
                        marked_at=VALUES(marked_at),
                        attendance_id=LAST_INSERT_ID(attendance_id)
                    """,
                    (int(employee_id), work_date, status.value, marked_at),
                )
                # 1 = inserted, 2 = existing row changed.
                return int(cur.lastrowid), cur.rowcount == 1
        except IntegrityError as e:
            if getattr(e, "errno", None) == errorcode.ER_NO_REFERENCED_ROW_2:
                raise NotFoundError("Employee not found") from e
            raise

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, marked_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, marked_at=%s
                WHERE attendance_id=%s
                """,
                (status.value, marked_at, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def delete_for_employee(self, employee_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE employee_id=%s", (int(employee_id),))
            return int(cur.rowcount)

    def list_page(self, flt: AttendanceFilter, page: PageRequest) -> tuple[Sequence[AttendanceRecord], int]:
        where, params = _where(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records ar {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                {_SELECT}
                {where}
                ORDER BY ar.work_date DESC, ar.created_at DESC, ar.attendance_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(page.limit), int(page.offset)]),
            )
            return [_row_to_record(r) for r in fetchall(cur)], total

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE ar.work_date >= %s AND ar.work_date < %s
                ORDER BY ar.created_at DESC, ar.attendance_id DESC
                """,
                (start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_by_status(self, flt: AttendanceFilter) -> dict[AttendanceStatus, int]:
        where, params = _where(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.status, COUNT(*) AS total
                FROM attendance_records ar
                {where}
                GROUP BY ar.status
                """,
                tuple(params),
            )
            return {AttendanceStatus(r["status"]): int(r["total"]) for r in fetchall(cur)}

    def count_by_employee_and_status(self, flt: AttendanceFilter) -> Sequence[StatusCountRow]:
        where, params = _where(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT e.employee_id, e.employee_code, e.name, e.department,
                       ar.status, COUNT(*) AS total
                FROM attendance_records ar
                JOIN employees e ON e.employee_id = ar.employee_id
                {where}
                GROUP BY e.employee_id, e.employee_code, e.name, e.department, ar.status
                """,
                tuple(params),
            )
            return [
                StatusCountRow(
                    employee_id=int(r["employee_id"]),
                    employee_code=r["employee_code"],
                    name=r["name"],
                    department=Department(r["department"]),
                    status=AttendanceStatus(r["status"]),
                    count=int(r["total"]),
                )
                for r in fetchall(cur)
            ]
