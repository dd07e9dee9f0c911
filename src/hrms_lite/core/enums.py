from __future__ import annotations

from enum import Enum


class Department(str, Enum):
    """Fixed set of departments an employee can belong to."""

    ENGINEERING = "Engineering"
    MARKETING = "Marketing"
    SALES = "Sales"
    HR = "HR"
    FINANCE = "Finance"
    OPERATIONS = "Operations"
    DESIGN = "Design"


class AttendanceStatus(str, Enum):
    """Status stored for one employee on one day."""

    PRESENT = "Present"
    ABSENT = "Absent"
