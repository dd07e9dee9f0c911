"""Declarative request validation.

A schema maps field names to :class:`Field` rule lists. :func:`validate` runs
every field and raises one :class:`ValidationError` listing all failures.
Within a field, rules stop at the first failure since later rules assume the
earlier ones passed (e.g. a range check on a value that is not a date).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field as dc_field
from datetime import date, timedelta
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..core.exceptions import FieldError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_day

Rule = Callable[[Any], Optional[str]]

_MISSING = object()


@dataclass(frozen=True)
class Field:
    rules: Sequence[Rule] = ()
    required: bool = False
    required_message: str = "Field is required"
    # Applied to the stripped string before the rules run.
    prepare: Optional[Callable[[Any], Any]] = None
    # Applied to the value after every rule passed.
    convert: Optional[Callable[[Any], Any]] = None
    default: Any = None


@dataclass
class ValidationResult:
    values: dict = dc_field(default_factory=dict)
    errors: list[FieldError] = dc_field(default_factory=list)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check(payload: Optional[Mapping[str, Any]], schema: Mapping[str, Field]) -> ValidationResult:
    payload = payload or {}
    result = ValidationResult()

    for name, field_def in schema.items():
        raw = payload.get(name, _MISSING)
        if raw is _MISSING or _is_blank(raw):
            if field_def.required:
                result.errors.append(FieldError(name, field_def.required_message, None if raw is _MISSING else raw))
            elif field_def.default is not None:
                result.values[name] = field_def.default
            continue

        value = raw.strip() if isinstance(raw, str) else raw
        if field_def.prepare is not None:
            value = field_def.prepare(value)

        failed = False
        for rule in field_def.rules:
            message = rule(value)
            if message:
                result.errors.append(FieldError(name, message, raw))
                failed = True
                break
        if failed:
            continue

        result.values[name] = field_def.convert(value) if field_def.convert is not None else value

    return result


def validate(payload: Optional[Mapping[str, Any]], schema: Mapping[str, Field]) -> dict:
    """Validate ``payload`` and return the cleaned values of the fields present."""
    result = check(payload, schema)
    if result.errors:
        raise ValidationError("Validation failed", result.errors)
    return result.values


# --- rules -------------------------------------------------------------------


def matches(pattern: str, message: str) -> Rule:
    compiled = re.compile(pattern)

    def rule(value: Any) -> Optional[str]:
        if not isinstance(value, str) or not compiled.fullmatch(value):
            return message
        return None

    return rule


def length(min_len: int, max_len: int, message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        if not isinstance(value, str) or not (min_len <= len(value) <= max_len):
            return message
        return None

    return rule


def max_length(max_len: int, message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        if isinstance(value, str) and len(value) > max_len:
            return message
        return None

    return rule


def one_of(values: Iterable[str], message: str) -> Rule:
    allowed = frozenset(values)

    def rule(value: Any) -> Optional[str]:
        if not isinstance(value, str) or value not in allowed:
            return message
        return None

    return rule


_EMAIL_RE = re.compile(r"^\w+([.+-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,})+$")


def email(message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        if not isinstance(value, str) or not _EMAIL_RE.match(value):
            return message
        return None

    return rule


def int_range(message: str, *, min_value: Optional[int] = None, max_value: Optional[int] = None) -> Rule:
    def rule(value: Any) -> Optional[str]:
        if isinstance(value, bool):
            return message
        try:
            number = int(str(value).strip())
        except (TypeError, ValueError):
            return message
        if min_value is not None and number < min_value:
            return message
        if max_value is not None and number > max_value:
            return message
        return None

    return rule


def iso_date(message: str) -> Rule:
    """Accept ``YYYY-MM-DD`` only."""

    def rule(value: Any) -> Optional[str]:
        try:
            parse_iso_date(str(value))
        except ValueError:
            return message
        return None

    return rule


def iso_day(message: str) -> Rule:
    """Accept an ISO-8601 date or date-time."""

    def rule(value: Any) -> Optional[str]:
        try:
            parse_iso_day(value)
        except (TypeError, ValueError):
            return message
        return None

    return rule


def day_not_after(today: Callable[[], date], message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        if parse_iso_day(value) > today():
            return message
        return None

    return rule


def day_not_before(today: Callable[[], date], days: int, message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        if parse_iso_day(value) < today() - timedelta(days=days):
            return message
        return None

    return rule


def require_id(value: Any, field_name: str = "id") -> int:
    """Validate a path/body identifier: a positive integer."""
    if int_range("", min_value=1)(value) is not None:
        raise ValidationError(
            f"Invalid {field_name} format",
            [FieldError(field_name, f"Invalid {field_name} format", value)],
        )
    return int(str(value).strip())
