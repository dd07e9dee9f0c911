from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class FieldError:
    """One failed rule for one input field."""

    field: str
    message: str
    value: Any = None

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message, "value": self.value}


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    Carries every field-level failure found, not only the first one.
    """

    def __init__(self, message: str = "Validation failed", errors: Optional[Sequence[FieldError]] = None):
        super().__init__(message)
        self.errors: list[FieldError] = list(errors or [])


class NotFoundError(DomainError):
    """Raised when a referenced employee or attendance record does not exist."""


class ConflictError(DomainError):
    """Raised when a unique key (employee code, email, attendance day) is already taken."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
