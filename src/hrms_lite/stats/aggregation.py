"""Attendance aggregation.

Statistics are computed on read from grouped ``(employee, status) -> count``
rows; nothing is maintained incrementally.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from ..attendance.model import StatusCountRow
from ..core.enums import AttendanceStatus


def status_totals(counts: Mapping[AttendanceStatus, int]) -> dict:
    """``{Present, Absent, Total}`` from a status -> count mapping; missing statuses count 0."""
    totals = {s.value: int(counts.get(s, 0)) for s in AttendanceStatus}
    totals["Total"] = sum(totals.values())
    return totals


def overall_from_rows(rows: Iterable[StatusCountRow]) -> dict:
    counts: dict[AttendanceStatus, int] = {}
    for r in rows:
        counts[r.status] = counts.get(r.status, 0) + r.count
    return status_totals(counts)


def by_employee(rows: Iterable[StatusCountRow]) -> list[dict]:
    """Re-group per-status rows by employee, busiest employees first."""
    grouped: dict[int, dict] = {}

    for r in rows:
        entry = grouped.get(r.employee_id)
        if not entry:
            entry = {
                "employeeId": r.employee_id,
                "employeeCode": r.employee_code,
                "name": r.name,
                "department": r.department.value,
                "attendance": [],
                "totalDays": 0,
            }
            grouped[r.employee_id] = entry
        entry["attendance"].append({"status": r.status.value, "count": r.count})
        entry["totalDays"] += r.count

    for entry in grouped.values():
        entry["attendance"].sort(key=lambda a: a["status"])

    return sorted(grouped.values(), key=lambda e: (-e["totalDays"], e["employeeCode"]))
