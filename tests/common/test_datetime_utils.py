from __future__ import annotations

from datetime import date, datetime

import pytest

from hrms_lite.common.datetime_utils import day_window, end_exclusive, parse_iso_day


@pytest.mark.parametrize(
    "value",
    [
        "2025-06-01",
        "2025-06-01T00:00:01",
        "2025-06-01T23:59:00",
        "2025-06-01T23:59:00Z",
        "2025-06-01T23:59:00.123+09:00",
        datetime(2025, 6, 1, 12, 0),
        date(2025, 6, 1),
    ],
)
def test_parse_iso_day_keeps_own_calendar_day(value):
    assert parse_iso_day(value) == date(2025, 6, 1)


def test_parse_iso_day_rejects_garbage():
    with pytest.raises(ValueError):
        parse_iso_day("2025-13-01")


def test_windows():
    assert day_window(date(2025, 12, 31)) == (date(2025, 12, 31), date(2026, 1, 1))
    assert end_exclusive(date(2024, 2, 28)) == date(2024, 2, 29)
