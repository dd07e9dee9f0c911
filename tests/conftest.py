from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from hrms_lite.attendance.model import AttendanceFilter, AttendanceRecord, StatusCountRow
from hrms_lite.common.pagination import PageRequest
from hrms_lite.container import build_services
from hrms_lite.core.enums import AttendanceStatus, Department
from hrms_lite.core.exceptions import ConflictError
from hrms_lite.employees.model import DepartmentCount, Employee, EmployeeFilter


class FakeClock:
    """Callable clock that tests move forward explicitly."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


class InMemoryEmployees:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._rows: dict[int, Employee] = {}
        self._next_id = 1

    def _check_unique(self, *, employee_code: Optional[str], email: Optional[str], exclude_id: Optional[int] = None):
        for e in self._rows.values():
            if e.employee_id == exclude_id:
                continue
            if employee_code is not None and e.employee_code == employee_code:
                raise ConflictError(f"Employee ID '{employee_code}' already exists", field="employeeCode")
            if email is not None and e.email == email.lower():
                raise ConflictError(f"Email address '{email}' is already registered", field="email")

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._rows.get(int(employee_id))

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return next((e for e in self._rows.values() if e.employee_code == employee_code), None)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self._rows.values() if e.email == email.lower()), None)

    def list_page(self, flt: EmployeeFilter, page: PageRequest):
        items = list(self._rows.values())
        if flt.department is not None:
            items = [e for e in items if e.department == flt.department]
        if flt.search:
            term = flt.search.lower()
            items = [
                e
                for e in items
                if term in e.name.lower() or term in e.employee_code.lower() or term in e.email.lower()
            ]
        items.sort(key=lambda e: (e.created_at, e.employee_id), reverse=True)
        return items[page.offset : page.offset + page.limit], len(items)

    def max_code_number(self) -> int:
        numbers = [int(e.employee_code[3:]) for e in self._rows.values() if e.employee_code[3:].isdigit()]
        return max(numbers, default=0)

    def create(self, *, employee_code: str, name: str, email: str, department: Department) -> int:
        self._check_unique(employee_code=employee_code, email=email)
        employee_id = self._next_id
        self._next_id += 1
        now = self._clock()
        self._rows[employee_id] = Employee(
            employee_id=employee_id,
            employee_code=employee_code,
            name=name,
            email=email.lower(),
            department=department,
            created_at=now,
            updated_at=now,
        )
        return employee_id

    def update(self, employee_id: int, changes: dict) -> bool:
        current = self._rows.get(int(employee_id))
        if not current:
            return False
        self._check_unique(
            employee_code=changes.get("employee_code"),
            email=changes.get("email"),
            exclude_id=current.employee_id,
        )
        if "email" in changes:
            changes = {**changes, "email": changes["email"].lower()}
        self._rows[current.employee_id] = replace(current, **changes, updated_at=self._clock())
        return True

    def delete_by_id(self, employee_id: int) -> bool:
        return self._rows.pop(int(employee_id), None) is not None

    def count(self) -> int:
        return len(self._rows)

    def count_by_department(self):
        counts: dict[Department, int] = {}
        for e in self._rows.values():
            counts[e.department] = counts.get(e.department, 0) + 1
        ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0].value))
        return [DepartmentCount(department=d, count=c) for d, c in ordered]


class InMemoryAttendance:
    """Keeps the (employee, day) uniqueness the database enforces."""

    def __init__(self, employees: InMemoryEmployees, clock: FakeClock):
        self._employees = employees
        self._clock = clock
        self._rows: dict[int, AttendanceRecord] = {}
        self._by_key: dict[tuple[int, date], int] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _joined(self, r: AttendanceRecord) -> Optional[AttendanceRecord]:
        e = self._employees.get_by_id(r.employee_id)
        if not e:
            return None
        return replace(
            r,
            employee_code=e.employee_code,
            employee_name=e.name,
            employee_email=e.email,
            department=e.department,
        )

    def _matching(self, flt: AttendanceFilter) -> list[AttendanceRecord]:
        out = []
        for r in self._rows.values():
            if flt.employee_id is not None and r.employee_id != flt.employee_id:
                continue
            if flt.status is not None and r.status != flt.status:
                continue
            if flt.start_date is not None and r.work_date < flt.start_date:
                continue
            if flt.end_date is not None and r.work_date >= flt.end_date:
                continue
            joined = self._joined(r)
            if joined:
                out.append(joined)
        return out

    def all_records(self) -> list[AttendanceRecord]:
        return list(self._rows.values())

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        r = self._rows.get(int(attendance_id))
        return self._joined(r) if r else None

    def upsert(self, *, employee_id: int, work_date: date, status: AttendanceStatus, marked_at: datetime):
        with self._lock:
            key = (employee_id, work_date)
            existing_id = self._by_key.get(key)
            if existing_id:
                current = self._rows[existing_id]
                self._rows[existing_id] = replace(current, status=status, marked_at=marked_at, updated_at=self._clock())
                return existing_id, False

            attendance_id = self._next_id
            self._next_id += 1
            now = self._clock()
            self._rows[attendance_id] = AttendanceRecord(
                attendance_id=attendance_id,
                employee_id=employee_id,
                work_date=work_date,
                status=status,
                marked_at=marked_at,
                created_at=now,
                updated_at=now,
            )
            self._by_key[key] = attendance_id
            return attendance_id, True

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, marked_at: datetime) -> bool:
        current = self._rows.get(int(attendance_id))
        if not current:
            return False
        self._rows[current.attendance_id] = replace(current, status=status, marked_at=marked_at, updated_at=self._clock())
        return True

    def delete_by_id(self, attendance_id: int) -> bool:
        r = self._rows.pop(int(attendance_id), None)
        if not r:
            return False
        self._by_key.pop((r.employee_id, r.work_date), None)
        return True

    def delete_for_employee(self, employee_id: int) -> int:
        ids = [r.attendance_id for r in self._rows.values() if r.employee_id == employee_id]
        for attendance_id in ids:
            self.delete_by_id(attendance_id)
        return len(ids)

    def list_page(self, flt: AttendanceFilter, page: PageRequest):
        items = self._matching(flt)
        items.sort(key=lambda r: (r.work_date, r.created_at, r.attendance_id), reverse=True)
        return items[page.offset : page.offset + page.limit], len(items)

    def list_between(self, start: date, end: date):
        items = self._matching(AttendanceFilter(start_date=start, end_date=end))
        items.sort(key=lambda r: (r.created_at, r.attendance_id), reverse=True)
        return items

    def count_by_status(self, flt: AttendanceFilter):
        counts: dict[AttendanceStatus, int] = {}
        for r in self._matching(flt):
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    def count_by_employee_and_status(self, flt: AttendanceFilter):
        grouped: dict[tuple[int, AttendanceStatus], list[AttendanceRecord]] = {}
        for r in self._matching(flt):
            grouped.setdefault((r.employee_id, r.status), []).append(r)
        return [
            StatusCountRow(
                employee_id=emp_id,
                employee_code=rows[0].employee_code,
                name=rows[0].employee_name,
                department=rows[0].department,
                status=status,
                count=len(rows),
            )
            for (emp_id, status), rows in grouped.items()
        ]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 6, 10, 9, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def employees_repo(clock) -> InMemoryEmployees:
    return InMemoryEmployees(clock)


@pytest.fixture
def attendance_repo(employees_repo, clock) -> InMemoryAttendance:
    return InMemoryAttendance(employees_repo, clock)


@pytest.fixture
def container(employees_repo, attendance_repo, clock):
    return build_services(employees_repo=employees_repo, attendance_repo=attendance_repo, now=clock)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from hrms_lite.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_employee(container):
    counter = {"n": 0}

    def _make(**overrides) -> Employee:
        counter["n"] += 1
        n = counter["n"]
        payload = {
            "name": f"Employee {chr(64 + n)}",
            "email": f"employee{n}@company.com",
            "department": "Engineering",
        }
        payload.update(overrides)
        return container.employee_service.create(payload)

    return _make
