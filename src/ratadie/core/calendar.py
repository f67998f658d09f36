"""
ratadie.core.calendar
---------------------
Plain date arithmetic used as the trusted side of every comparison.

Nothing here shares a formula with the engines: leap years come from the
textbook divisibility rule, month lengths from a table, and day counts from
the Fliegel-Van Flandern Julian Day Number formulas (floor division, so they
hold for every integer year, including negative ones).
"""

from __future__ import annotations

from .types import Date, IntType

_MONTH_DAYS = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(y):
    """Gregorian rule. Uses & and | so it also works elementwise on arrays."""
    return (y % 4 == 0) & ((y % 100 != 0) | (y % 400 == 0))


def last_day_of_month(y: int, m: int) -> int:
    if m == 2:
        return 29 if is_leap_year(y) else 28
    return _MONTH_DAYS[m]


def is_valid_date(d: Date) -> bool:
    return 1 <= d.month <= 12 and 1 <= d.day <= last_day_of_month(d.year, d.month)


def next_date(d: Date) -> Date:
    """The calendar day after d. Years are unbounded: no overflow at any type's max."""
    if d.day != last_day_of_month(d.year, d.month):
        return Date(d.year, d.month, d.day + 1)
    if d.month != 12:
        return Date(d.year, d.month + 1, 1)
    return Date(d.year + 1, 1, 1)


def previous_date(d: Date) -> Date:
    """The calendar day before d."""
    if d.day != 1:
        return Date(d.year, d.month, d.day - 1)
    if d.month != 1:
        return Date(d.year, d.month - 1, last_day_of_month(d.year, d.month - 1))
    return Date(d.year - 1, 12, 31)


def min_date(year_type: IntType) -> Date:
    return Date(year_type.min, 1, 1)


def max_date(year_type: IntType) -> Date:
    return Date(year_type.max, 12, 31)


# ============================================================
# Unbounded day counts (Fliegel-Van Flandern)
# ============================================================

def to_jdn(d: Date) -> int:
    """Convert a proleptic Gregorian date to its Julian Day Number (JDN)."""
    y, m, day = d.year, d.month, d.day
    a = (14 - m) // 12
    y2 = y + 4800 - a
    m2 = m + 12 * a - 3
    return day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045


def from_jdn(jdn: int) -> Date:
    """Fliegel-Van Flandern inverse of to_jdn."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return Date(year, month, day)


def days_from(epoch: Date, d: Date) -> int:
    """Exact day count of d relative to epoch."""
    return to_jdn(d) - to_jdn(epoch)


def date_from(epoch: Date, days: int) -> Date:
    """Exact date lying `days` days after epoch."""
    return from_jdn(to_jdn(epoch) + days)
