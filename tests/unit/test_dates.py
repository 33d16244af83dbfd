from datetime import datetime, timezone, timedelta
import pytest
from utils.dates import add_months, as_utc


@pytest.mark.parametrize("start, expected", [
    (datetime(2025, 3, 15, 9, 30), datetime(2025, 4, 15, 9, 30)),
    (datetime(2025, 1, 31, 23, 59), datetime(2025, 2, 28, 23, 59)),
    (datetime(2024, 1, 31, 8, 0), datetime(2024, 2, 29, 8, 0)),
    (datetime(2025, 3, 31), datetime(2025, 4, 30)),
    (datetime(2025, 12, 31, 12, 0), datetime(2026, 1, 31, 12, 0)),
])
def test_add_one_month(start, expected):
    assert add_months(start, 1) == expected


def test_add_months_keeps_timezone_and_microseconds():
    start = datetime(2025, 5, 31, 10, 0, 0, 123456, tzinfo=timezone.utc)

    result = add_months(start)

    assert result == datetime(2025, 6, 30, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert result.tzinfo == timezone.utc


def test_add_months_across_years():
    assert add_months(datetime(2025, 11, 30), 3) == datetime(2026, 2, 28)


def test_as_utc_naive_is_treated_as_utc():
    assert as_utc(datetime(2025, 1, 1, 12, 0)) == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_as_utc_converts_offsets():
    plus_two = timezone(timedelta(hours=2))
    value = as_utc(datetime(2025, 1, 1, 14, 0, tzinfo=plus_two))

    assert value == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert value.tzinfo == timezone.utc
