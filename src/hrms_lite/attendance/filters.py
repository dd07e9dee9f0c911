from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import end_exclusive
from ..core.enums import AttendanceStatus
from ..core.exceptions import FieldError, ValidationError
from .model import AttendanceFilter


def date_range_filter(
    values: dict,
    *,
    employee_id: Optional[int] = None,
    status: Optional[AttendanceStatus] = None,
) -> AttendanceFilter:
    """Build a filter from validated ``startDate``/``endDate``; the end day is inclusive."""
    start = values.get("startDate")
    end = values.get("endDate")

    if start and end and end < start:
        raise ValidationError(
            "Validation failed",
            [FieldError("endDate", "End date must be after start date", end.isoformat())],
        )

    return AttendanceFilter(
        employee_id=employee_id,
        status=status,
        start_date=start,
        end_date=end_exclusive(end) if end else None,
    )
