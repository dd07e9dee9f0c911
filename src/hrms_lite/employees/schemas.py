"""Validation rule sets for employee requests."""

from __future__ import annotations

from ..common.query import pagination_fields
from ..common.validators import Field, email, length, matches, max_length, one_of
from ..core.constants import EMAIL_MAX_LENGTH, EMPLOYEE_CODE_PREFIX, NAME_MAX_LENGTH, NAME_MIN_LENGTH
from ..core.enums import Department

DEPARTMENT_NAMES = [d.value for d in Department]

_CODE_MESSAGE = f"Employee ID must be in format {EMPLOYEE_CODE_PREFIX}001, {EMPLOYEE_CODE_PREFIX}002, etc."
_NAME_LENGTH_MESSAGE = f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
_NAME_CHARS_MESSAGE = "Name can only contain letters, spaces, hyphens, and apostrophes"
_EMAIL_MESSAGE = "Please provide a valid email address"
_EMAIL_LENGTH_MESSAGE = f"Email cannot exceed {EMAIL_MAX_LENGTH} characters"
_DEPARTMENT_MESSAGE = f"Department must be one of: {', '.join(DEPARTMENT_NAMES)}"


def _employee_fields(*, required: bool) -> dict[str, Field]:
    return {
        "employeeCode": Field(
            rules=[matches(rf"{EMPLOYEE_CODE_PREFIX}\d{{3,}}", _CODE_MESSAGE)],
            prepare=lambda v: str(v).upper(),
        ),
        "name": Field(
            rules=[
                length(NAME_MIN_LENGTH, NAME_MAX_LENGTH, _NAME_LENGTH_MESSAGE),
                matches(r"[A-Za-z\s'-]+", _NAME_CHARS_MESSAGE),
            ],
            required=required,
            required_message="Full name is required",
        ),
        "email": Field(
            rules=[max_length(EMAIL_MAX_LENGTH, _EMAIL_LENGTH_MESSAGE), email(_EMAIL_MESSAGE)],
            required=required,
            required_message="Email address is required",
            prepare=lambda v: str(v).lower(),
        ),
        "department": Field(
            rules=[one_of(DEPARTMENT_NAMES, _DEPARTMENT_MESSAGE)],
            required=required,
            required_message="Department is required",
            convert=Department,
        ),
    }


EMPLOYEE_CREATE = _employee_fields(required=True)
EMPLOYEE_UPDATE = _employee_fields(required=False)

EMPLOYEE_QUERY = {
    **pagination_fields(),
    "department": Field(rules=[one_of(DEPARTMENT_NAMES, _DEPARTMENT_MESSAGE)], convert=Department),
    "search": Field(rules=[max_length(100, "Search term cannot exceed 100 characters")]),
}
