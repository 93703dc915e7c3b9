"""Jurisdiction holiday calendars and working-day counting.

Holidays are derived, never stored: every call recomputes the year's dates
from the jurisdiction rules, so the same year always yields the same result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from staffhub.core.config import settings
from staffhub.core.exceptions import InputError


MIN_YEAR = 1583
MAX_YEAR = 9999


@dataclass(frozen=True)
class Holiday:
    day: date
    name: str
    movable: bool = False


@dataclass(frozen=True)
class Jurisdiction:
    code: str
    name: str
    fixed: tuple[tuple[int, int, str], ...]
    # Day offsets relative to Easter Sunday.
    movable: tuple[tuple[int, str], ...]


PORTUGAL = Jurisdiction(
    code="PT",
    name="Portugal",
    fixed=(
        (1, 1, "New Year's Day"),
        (4, 25, "Freedom Day"),
        (5, 1, "Labour Day"),
        (6, 10, "Portugal Day"),
        (8, 15, "Assumption"),
        (10, 5, "Republic Day"),
        (11, 1, "All Saints' Day"),
        (12, 1, "Restoration of Independence"),
        (12, 8, "Immaculate Conception"),
        (12, 25, "Christmas Day"),
    ),
    movable=(
        (-2, "Good Friday"),
        (60, "Corpus Christi"),
    ),
)

JURISDICTIONS: dict[str, Jurisdiction] = {PORTUGAL.code: PORTUGAL}


def get_jurisdiction(code: str | None = None) -> Jurisdiction:
    key = (code or settings.jurisdiction).upper()
    try:
        return JURISDICTIONS[key]
    except KeyError as exc:
        raise InputError(f"Unknown holiday jurisdiction '{key}'") from exc


def _check_year(year: int) -> int:
    if isinstance(year, bool) or not isinstance(year, int):
        raise InputError(f"Year must be an integer, got {year!r}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InputError(f"Year {year} is outside the supported range {MIN_YEAR}-{MAX_YEAR}")
    return year


def easter_sunday(year: int) -> date:
    """Anonymous Gregorian computus (Meeus/Jones/Butcher)."""
    _check_year(year)
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def list_holidays(year: int, jurisdiction: str | None = None) -> tuple[Holiday, ...]:
    """Named holiday entries for ``year``, ordered by date."""
    calendar = get_jurisdiction(jurisdiction)
    easter = easter_sunday(year)

    entries = [Holiday(day=date(year, month, dom), name=name) for month, dom, name in calendar.fixed]
    entries.extend(
        Holiday(day=easter + timedelta(days=offset), name=name, movable=True)
        for offset, name in calendar.movable
    )
    return tuple(sorted(entries, key=lambda h: (h.day, h.name)))


def compute_holidays(year: int, jurisdiction: str | None = None) -> tuple[date, ...]:
    """Distinct holiday dates for ``year``, ascending."""
    return tuple(sorted({h.day for h in list_holidays(year, jurisdiction)}))


def to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InputError(f"Unparsable date '{value}'") from exc
    raise InputError(f"Expected a date, got {type(value).__name__}")


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_holiday(day: date | datetime | str, jurisdiction: str | None = None) -> bool:
    day = to_date(day)
    return day in compute_holidays(day.year, jurisdiction)


def check_span(start: date | datetime | str, end: date | datetime | str, limit: int | None = None) -> int:
    """Inclusive length of [start, end] in calendar days; raises if it exceeds ``limit``."""
    first = to_date(start)
    last = to_date(end)
    limit = settings.max_range_days if limit is None else limit
    span = (last - first).days + 1
    if span > limit:
        raise InputError(f"Date range covers {span} days; at most {limit} are accepted")
    return max(span, 0)


def count_working_days(
    start: date | datetime | str,
    end: date | datetime | str,
    jurisdiction: str | None = None,
) -> int:
    """Count weekdays in [start, end] that are not holidays.

    An inverted range simply walks zero days and returns 0.
    """
    first = to_date(start)
    last = to_date(end)
    get_jurisdiction(jurisdiction)

    # Built fresh for each call; a range crossing a year boundary uses both calendars.
    calendars: dict[int, frozenset[date]] = {}
    count = 0
    for offset in range((last - first).days + 1):
        current = first + timedelta(days=offset)
        if is_weekend(current):
            continue
        if current.year not in calendars:
            calendars[current.year] = frozenset(compute_holidays(current.year, jurisdiction))
        if current not in calendars[current.year]:
            count += 1
    return count
