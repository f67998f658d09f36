"""
ratadie.diagnostics.sweep
-------------------------
Array building blocks for exhaustive sweeps.

Everything here is the trusted side of the comparison: dates are enumerated
from month lengths and successors are recognised field by field, without
any of the day-count formulas under test.
"""

from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from ..core.calendar import is_leap_year
from ..core.errors import UnsupportedWidthError
from ..core.types import Date

Fields = Tuple[np.ndarray, np.ndarray, np.ndarray]

_MONTH_DAYS = np.array([0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31], dtype=np.int64)

DEFAULT_CHUNK_SIZE = 1 << 22


def require_sweepable(algo, *, full: bool) -> None:
    """Sweeps hold day counts in int64 arrays; exhaustive ones only make sense up to 32 bits."""
    rd = algo.rata_die_type
    if rd.bits == 64 and not rd.signed:
        raise UnsupportedWidthError(f"{rd} day counts do not fit in int64 arrays")
    if full and rd.bits > 32:
        raise UnsupportedWidthError(f"exhaustive sweeps over {rd} day counts are not supported; pass a window")


# ============================================================
# Calendar arrays
# ============================================================

def last_day_of_month_array(y: np.ndarray, m: np.ndarray) -> np.ndarray:
    m = np.clip(m, 1, 12)
    return _MONTH_DAYS[m] + ((m == 2) & is_leap_year(y))


def is_successor(y0, m0, d0, y1, m1, d1) -> np.ndarray:
    """Elementwise: is (y1, m1, d1) the calendar day after the valid date (y0, m0, d0)?"""
    last = last_day_of_month_array(y0, m0)
    valid = (m0 >= 1) & (m0 <= 12) & (d0 >= 1) & (d0 <= last)
    same_month = (d0 < last) & (y1 == y0) & (m1 == m0) & (d1 == d0 + 1)
    next_month = (d0 == last) & (m0 < 12) & (y1 == y0) & (m1 == m0 + 1) & (d1 == 1)
    next_year = (d0 == last) & (m0 == 12) & (y1 == y0 + 1) & (m1 == 1) & (d1 == 1)
    return valid & (same_month | next_month | next_year)


def date_key(y, m, d):
    """Monotone integer key for lexicographic date order (valid months and days only)."""
    return (y * 13 + m) * 32 + d


def dates_in_years(first_year: int, last_year: int) -> Fields:
    """Every date of the years first_year..last_year, in order."""
    years = np.arange(first_year, last_year + 1, dtype=np.int64)
    ym_y = np.repeat(years, 12)
    ym_m = np.tile(np.arange(1, 13, dtype=np.int64), years.size)
    lengths = last_day_of_month_array(ym_y, ym_m)
    starts = np.cumsum(lengths) - lengths
    y = np.repeat(ym_y, lengths)
    m = np.repeat(ym_m, lengths)
    d = np.arange(int(lengths.sum()), dtype=np.int64) - np.repeat(starts, lengths) + 1
    return y, m, d


# ============================================================
# Chunking
# ============================================================

def int_chunks(start: int, stop: int, chunk_size: int) -> Iterator[np.ndarray]:
    """start, start +- 1, ..., stop (inclusive), in pieces of at most chunk_size values."""
    step = 1 if stop >= start else -1
    a = start
    while (stop - a) * step >= 0:
        b = a + step * (chunk_size - 1)
        if (b - stop) * step > 0:
            b = stop
        yield np.arange(a, b + step, step, dtype=np.int64)
        a = b + step


def date_chunks(start: Date, stop: Date, chunk_size: int) -> Iterator[Fields]:
    """Every date from start to stop (inclusive, either direction), whole years at a time."""
    years_per_chunk = max(1, chunk_size // 366)
    lo, hi = min(start, stop), max(start, stop)
    k_lo, k_hi = date_key(*lo), date_key(*hi)

    if start <= stop:
        year_ranges = (
            (ya, min(ya + years_per_chunk - 1, hi.year))
            for ya in range(lo.year, hi.year + 1, years_per_chunk)
        )
    else:
        year_ranges = (
            (max(yb - years_per_chunk + 1, lo.year), yb)
            for yb in range(hi.year, lo.year - 1, -years_per_chunk)
        )

    for ya, yb in year_ranges:
        y, m, d = dates_in_years(ya, yb)
        k = date_key(y, m, d)
        keep = (k >= k_lo) & (k <= k_hi)
        y, m, d = y[keep], m[keep], d[keep]
        if start > stop:
            y, m, d = y[::-1], m[::-1], d[::-1]
        if y.size:
            yield y, m, d


def first_false(ok: np.ndarray) -> int:
    """Index of the first False in ok, or -1."""
    bad = np.flatnonzero(~ok)
    return int(bad[0]) if bad.size else -1
