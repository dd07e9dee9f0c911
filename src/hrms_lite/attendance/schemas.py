"""Validation rule sets for attendance requests.

The date-window rules need "today", so mark schemas are built per call.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from ..common.datetime_utils import parse_iso_date, parse_iso_day
from ..common.query import pagination_fields
from ..common.validators import Field, day_not_after, day_not_before, int_range, iso_date, iso_day, one_of
from ..core.constants import ATTENDANCE_LOOKBACK_DAYS
from ..core.enums import AttendanceStatus

STATUS_NAMES = [s.value for s in AttendanceStatus]
_STATUS_MESSAGE = "Status must be either Present or Absent"


def _status_field(*, required: bool) -> Field:
    return Field(
        rules=[one_of(STATUS_NAMES, _STATUS_MESSAGE)],
        required=required,
        required_message="Attendance status is required",
        convert=AttendanceStatus,
    )


def _employee_id_field(*, required: bool) -> Field:
    return Field(
        rules=[int_range("Invalid employee ID format", min_value=1)],
        required=required,
        required_message="Employee ID is required",
        convert=int,
    )


def attendance_mark_schema(today: Callable[[], date]) -> dict[str, Field]:
    return {
        "employeeId": _employee_id_field(required=True),
        "date": Field(
            rules=[
                iso_day("Date must be in valid ISO format (YYYY-MM-DD)"),
                day_not_after(today, "Attendance date cannot be in the future"),
                day_not_before(
                    today,
                    ATTENDANCE_LOOKBACK_DAYS,
                    f"Attendance date cannot be older than {ATTENDANCE_LOOKBACK_DAYS} days",
                ),
            ],
            required=True,
            required_message="Date is required",
            convert=parse_iso_day,
        ),
        "status": _status_field(required=True),
    }


ATTENDANCE_UPDATE = {"status": _status_field(required=True)}

_DATE_RANGE = {
    "startDate": Field(
        rules=[iso_date("Start date must be in valid ISO format (YYYY-MM-DD)")],
        convert=parse_iso_date,
    ),
    "endDate": Field(
        rules=[iso_date("End date must be in valid ISO format (YYYY-MM-DD)")],
        convert=parse_iso_date,
    ),
}

ATTENDANCE_QUERY = {
    **pagination_fields(),
    "employeeId": _employee_id_field(required=False),
    "status": _status_field(required=False),
    **_DATE_RANGE,
}

ATTENDANCE_STATS_QUERY = {
    "employeeId": _employee_id_field(required=False),
    **_DATE_RANGE,
}
