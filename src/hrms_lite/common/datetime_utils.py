from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_day(value: Union[str, date, datetime]) -> date:
    """Parse an ISO-8601 date or date-time and keep only its calendar day.

    The day is read from the value's own fields; an offset such as ``Z`` or
    ``+07:00`` is not converted to local time first, so
    ``2025-06-01T23:59:00Z`` stays on June 1st.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if len(text) == 10:
        return parse_iso_date(text)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def day_window(day: date) -> tuple[date, date]:
    """Half-open window ``[day, next day)`` selecting exactly one calendar day."""
    return day, day + timedelta(days=1)


def end_exclusive(end: date) -> date:
    """Turn an inclusive end date into the exclusive bound used by range queries."""
    return end + timedelta(days=1)
