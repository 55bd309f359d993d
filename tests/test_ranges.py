from datetime import datetime, timedelta, timezone

import pytest

from trenddelta.core import TIME_RANGES, resolve_time_range, time_range_by_name, time_range_names
from trenddelta.types import ALL_TIME, AbsoluteRange


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


NOW = utc(2024, 3, 15, 10, 30)


@pytest.mark.parametrize(
    "name, start, end",
    [
        ("Last day", utc(2024, 3, 14), utc(2024, 3, 15)),
        ("Last week", utc(2024, 3, 8), utc(2024, 3, 15)),
        ("Last month", utc(2024, 2, 15), utc(2024, 3, 15)),
        ("Last year", utc(2023, 3, 15), utc(2024, 3, 15)),
    ],
)
def test_relative_ranges_end_at_midnight(name, start, end):
    assert resolve_time_range(name, NOW) == AbsoluteRange(start, end)


def test_all_time_ignores_now():
    assert resolve_time_range("All time", NOW) == ALL_TIME
    assert resolve_time_range("All time", utc(1999, 1, 1)) == ALL_TIME
    assert ALL_TIME.contains(utc(1, 1, 1))
    assert ALL_TIME.contains(NOW)


@pytest.mark.parametrize("name", ["Last decade", "last day", "", None])
def test_unknown_range_falls_back_to_all_time(name):
    assert resolve_time_range(name, NOW) == resolve_time_range("All time", NOW)
    assert time_range_by_name(name).name == "All time"


def test_range_names_in_catalog_order():
    assert time_range_names() == ["All time", "Last day", "Last week", "Last month", "Last year"]
    assert [r.name for r in TIME_RANGES] == time_range_names()


def test_last_day_uses_local_calendar_day(brussels):
    # 23:30Z on the 15th is already the 16th in Brussels
    bounds = resolve_time_range("Last day", utc(2024, 3, 15, 23, 30), brussels)
    assert bounds == AbsoluteRange(utc(2024, 3, 14, 23), utc(2024, 3, 15, 23))


def test_last_week_across_dst_is_seven_local_days(brussels):
    bounds = resolve_time_range("Last week", utc(2024, 4, 1, 10), brussels)
    assert bounds.end == utc(2024, 3, 31, 22)
    assert bounds.start == utc(2024, 3, 24, 23)
    assert bounds.end - bounds.start == timedelta(days=7, hours=-1)


def test_last_month_clamps_to_month_length():
    bounds = resolve_time_range("Last month", utc(2024, 3, 31, 12))
    assert bounds == AbsoluteRange(utc(2024, 2, 29), utc(2024, 3, 31))


def test_range_is_half_open():
    bounds = resolve_time_range("Last day", NOW)
    assert bounds.contains(bounds.start)
    assert not bounds.contains(bounds.end)
    assert not bounds.contains(bounds.start - timedelta(microseconds=1))
