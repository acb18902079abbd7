from datetime import date

import pytest

from utils.date_range import DateRange, DateRangeError, in_range, parse_date_range


def test_parse_both_bounds():
    assert parse_date_range("2024-01-01", "2024-01-31") == DateRange(
        start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
    )


@pytest.mark.parametrize("start, end, expected", [
    (None, None, DateRange()),
    ("2024-01-01", None, DateRange(start_date=date(2024, 1, 1))),
    (None, "2024-01-31", DateRange(end_date=date(2024, 1, 31))),
    ("", " ", DateRange()),
])
def test_bounds_are_independently_optional(start, end, expected):
    assert parse_date_range(start, end) == expected


def test_same_day_range_is_allowed():
    assert parse_date_range("2024-05-05", "2024-05-05").start_date == date(2024, 5, 5)


@pytest.mark.parametrize("start, end", [
    ("2024-13-01", None),
    ("01/02/2024", None),
    (None, "yesterday"),
])
def test_unparseable_dates_are_rejected(start, end):
    with pytest.raises(DateRangeError, match="YYYY-MM-DD"):
        parse_date_range(start, end)


def test_end_before_start_is_rejected():
    with pytest.raises(DateRangeError, match="Start date cannot be after the end date"):
        parse_date_range("2024-02-01", "2024-01-31")


def test_in_range_is_inclusive_on_both_sides():
    date_range = DateRange(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))

    assert in_range(date(2024, 1, 1), date_range)
    assert in_range(date(2024, 1, 31), date_range)
    assert not in_range(date(2023, 12, 31), date_range)
    assert not in_range(date(2024, 2, 1), date_range)


def test_in_range_open_sides():
    assert in_range(date(1999, 1, 1), None)
    assert in_range(date(1999, 1, 1), DateRange())
    assert in_range(date(2030, 1, 1), DateRange(start_date=date(2024, 1, 1)))
    assert not in_range(date(2030, 1, 1), DateRange(end_date=date(2024, 1, 1)))
    assert not DateRange().is_bounded
    assert DateRange(end_date=date(2024, 1, 1)).is_bounded
