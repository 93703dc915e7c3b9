from __future__ import annotations

from datetime import date, datetime

import pytest

from staffhub.core.exceptions import InputError
from staffhub.core.holidays import (
    compute_holidays,
    count_working_days,
    easter_sunday,
    is_holiday,
    is_weekend,
    list_holidays,
)


@pytest.mark.parametrize(
    "year, expected",
    [
        (2024, date(2024, 3, 31)),
        (2025, date(2025, 4, 20)),
        (2026, date(2026, 4, 5)),
        (2004, date(2004, 4, 11)),
        (2038, date(2038, 4, 25)),
    ],
)
def test_easter_matches_reference_dates(year, expected):
    assert easter_sunday(year) == expected


def test_2026_calendar():
    assert compute_holidays(2026) == (
        date(2026, 1, 1),
        date(2026, 4, 3),
        date(2026, 4, 25),
        date(2026, 5, 1),
        date(2026, 6, 4),
        date(2026, 6, 10),
        date(2026, 8, 15),
        date(2026, 10, 5),
        date(2026, 11, 1),
        date(2026, 12, 1),
        date(2026, 12, 8),
        date(2026, 12, 25),
    )


def test_movable_holidays_are_flagged():
    movable = {h.name: h.day for h in list_holidays(2025) if h.movable}
    assert movable == {"Good Friday": date(2025, 4, 18), "Corpus Christi": date(2025, 6, 19)}


def test_every_year_has_twelve_holidays_inside_the_year():
    for year in range(1900, 2201):
        entries = list_holidays(year)
        dates = compute_holidays(year)

        assert len(entries) == 12
        assert all(d.year == year for d in dates)
        assert list(dates) == sorted(set(dates))
        if easter_sunday(year) == date(year, 4, 11):
            # Corpus Christi falls on Portugal Day.
            assert len(dates) == 11
        else:
            assert len(dates) == 12


def test_corpus_christi_on_portugal_day_is_one_date():
    names = {h.name for h in list_holidays(2004) if h.day == date(2004, 6, 10)}
    assert names == {"Corpus Christi", "Portugal Day"}
    assert len(list_holidays(2004)) == 12
    assert len(compute_holidays(2004)) == 11


def test_compute_holidays_is_idempotent():
    assert compute_holidays(2031) == compute_holidays(2031)
    assert list_holidays(2031) == list_holidays(2031)


@pytest.mark.parametrize("year", [1582, 10000, -1])
def test_out_of_range_year_is_rejected(year):
    with pytest.raises(InputError):
        compute_holidays(year)


@pytest.mark.parametrize("year", ["2026", 2026.0, True, None])
def test_non_integer_year_is_rejected(year):
    with pytest.raises(InputError):
        compute_holidays(year)


def test_unknown_jurisdiction_is_rejected():
    with pytest.raises(InputError):
        compute_holidays(2026, jurisdiction="XX")


def test_weekend_and_holiday_helpers():
    assert is_weekend(date(2026, 1, 3))
    assert not is_weekend(date(2026, 1, 2))
    assert is_holiday(date(2026, 12, 25))
    assert is_holiday("2026-04-03")
    assert not is_holiday(datetime(2026, 4, 6, 9, 30))
