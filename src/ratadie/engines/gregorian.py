"""
ratadie.engines.gregorian
-------------------------
Closed-form conversion between day counts and proleptic Gregorian dates,
for any combination of year type, day-count type and epoch.

Internally days are counted in unsigned W-bit arithmetic (W = width of the
day count) from 0000-03-01, so that February, with its leap day, closes the
computational year. That origin is moved forward by a whole number of
400-year cycles, s, so that the representable day counts land on
non-negative internal values:

    internal day  N = n + K,     K = d_epoch + 146097*s
    internal year Y = y + L,     L = 400*s

where d_epoch is the number of days from 0000-03-01 to the epoch. A signed
day count centres its range on the epoch; an unsigned one starts at the
epoch (or at the first cycle boundary making K non-negative).

Every step that would wrap in W-bit arithmetic is reduced explicitly, so
results outside the declared bounds are the modular results of the fixed
width, never exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..core.calendar import date_from, days_from, is_valid_date, last_day_of_month
from ..core.errors import UnsupportedWidthError
from ..core.types import (
    COMPUTATIONAL_EPOCH, UINT32, UNIX_EPOCH, AlgorithmId, Bounds, Date, IntType,
)
from ..design.fast_division import FastDivider
from .interfaces import FieldAlgorithm

DAYS_IN_400_YEARS = 146097
DAYS_IN_4_YEARS = 1461

# Day of the computational year (0 = March 1st) -> month and day:
#   p = 2141*r + 197657,  month = p >> 16,  day = (p & 0xFFFF) // 2141 + 1
MONTH_MUL = 2141
MONTH_ADD = 197657
# Month (March = 3 ... February = 14) -> day of the computational year:
#   (979*m - 2919) // 32
DOY_MUL = 979
DOY_SUB = 2919

# The remainder fed to the fast division by 1461 never exceeds 146096 | 3.
_MAX_CYCLE_REMAINDER = (DAYS_IN_400_YEARS - 1) | 3


@dataclass(frozen=True)
class GregorianConstants:
    """Per-instantiation shift constants."""
    cycles: int          # s
    day_shift: int       # K
    year_shift: int      # L
    max_internal_day: int    # largest N with 4N+3 < 2^W
    max_internal_year: int   # largest Y with 1461*Y < 2^W


def derive_constants(rata_die_type: IntType, epoch: Date) -> GregorianConstants:
    u = rata_die_type.unsigned()
    n_max = (u.mask - 3) // 4
    y_max = u.mask // DAYS_IN_4_YEARS
    d_epoch = days_from(COMPUTATIONAL_EPOCH, epoch)

    if rata_die_type.signed:
        # Nearest whole number of cycles to (n_max + 1)/2 - d_epoch.
        num = (n_max + 1) // 2 - d_epoch
        s = (2 * num + DAYS_IN_400_YEARS) // (2 * DAYS_IN_400_YEARS)
    else:
        s = 0 if d_epoch >= 0 else -(d_epoch // DAYS_IN_400_YEARS)

    return GregorianConstants(
        cycles=s,
        day_shift=d_epoch + DAYS_IN_400_YEARS * s,
        year_shift=400 * s,
        max_internal_day=n_max,
        max_internal_year=y_max,
    )


def derive_bounds(year_type: IntType, rata_die_type: IntType, epoch: Date, c: GregorianConstants) -> Bounds:
    """
    Ranges over which the formulas are exact, computed with unbounded integers.

    to_date needs n representable, 0 <= n + K <= max_internal_day and a
    representable year. to_rata_die needs the date representable, a
    non-negative internal date (on or after March 1st of year -L) and
    1461*Y not overflowing, which allows up to the end of February of
    internal year max_internal_year + 1.
    """
    def rd(d: Date) -> int:
        return days_from(epoch, d)

    def date_of(n: int) -> Date:
        return date_from(epoch, n)

    first = Date(year_type.min, 1, 1)
    last = Date(year_type.max, 12, 31)

    rmin = max(rata_die_type.min, -c.day_shift, rd(first))
    rmax = min(rata_die_type.max, c.max_internal_day - c.day_shift, rd(last))

    y_end = c.max_internal_year - c.year_shift + 1
    dmin = max(first, Date(-c.year_shift, 3, 1), date_of(rata_die_type.min))
    dmax = min(last, Date(y_end, 2, last_day_of_month(y_end, 2)), date_of(rata_die_type.max))

    round_rmin = max(rmin, rd(dmin))
    round_rmax = min(rmax, rd(dmax))

    return Bounds(
        rata_die_min=rmin,
        rata_die_max=rmax,
        date_min=dmin,
        date_max=dmax,
        round_rata_die_min=round_rmin,
        round_rata_die_max=round_rmax,
        round_date_min=date_of(round_rmin),
        round_date_max=date_of(round_rmax),
    )


class Gregorian(FieldAlgorithm):
    """
    The conversion core. Both directions are straight-line integer code:
    no loops, no tables, no test on leap years.
    """

    def __init__(
        self,
        year_type: IntType,
        rata_die_type: IntType,
        epoch: Date = UNIX_EPOCH,
        *,
        id: Optional[AlgorithmId] = None,
    ):
        if rata_die_type.bits not in (32, 64):
            raise UnsupportedWidthError(f"day count must be 32 or 64 bits wide, got {rata_die_type}")
        if year_type.bits > rata_die_type.bits:
            raise UnsupportedWidthError(f"year type {year_type} is wider than day count type {rata_die_type}")
        if not is_valid_date(epoch):
            raise ValueError(f"epoch {epoch} is not a valid date")
        if not year_type.contains(epoch.year):
            raise ValueError(f"epoch year {epoch.year} is not representable in {year_type}")

        self.year_type = year_type
        self.rata_die_type = rata_die_type
        self.epoch = epoch
        self.id = id or AlgorithmId("eaf", f"gregorian-{year_type.name}-{rata_die_type.name}@{epoch}", "1")

        self._u = rata_die_type.unsigned()
        self._div_1461 = FastDivider.derive(DAYS_IN_4_YEARS, 32)
        if not self._div_1461.covers(_MAX_CYCLE_REMAINDER):
            raise UnsupportedWidthError(
                f"division by {DAYS_IN_4_YEARS} is exact up to {self._div_1461.max_dividend}, "
                f"need {_MAX_CYCLE_REMAINDER}"
            )

        self.constants = derive_constants(rata_die_type, epoch)
        self.bounds = derive_bounds(year_type, rata_die_type, epoch, self.constants)
        b = self.bounds
        if not (b.rata_die_min <= 0 <= b.rata_die_max and b.date_min <= epoch <= b.date_max):
            raise ValueError(f"epoch {epoch} lies outside the convertible range of {year_type}/{rata_die_type}")

    # ---------------------------------------------------------
    # Protocol Methods
    # ---------------------------------------------------------

    def to_date_fields(self, n) -> Tuple[Any, Any, Any]:
        u = self._u
        K = self.constants.day_shift
        L = self.constants.year_shift

        N = u.wrap(n + K)

        # Century and day of century
        p1 = u.wrap(4 * N + 3)
        q1 = p1 // DAYS_IN_400_YEARS
        r1 = p1 % DAYS_IN_400_YEARS

        # Year of century and day of year
        p2 = r1 | 3
        q2, r = self._div_1461.divmod(p2)
        r2 = r // 4

        # Month and day
        p3 = MONTH_MUL * r2 + MONTH_ADD
        m = p3 >> 16
        d = (p3 & 0xFFFF) // MONTH_MUL

        # January and February belong to the next civil year
        y = u.wrap(100 * q1 + q2)
        j = r2 > 305

        return self.year_type.wrap(u.wrap(y + j) - L), m - 12 * j, d + 1

    def to_rata_die_fields(self, y, m, d) -> Any:
        u = self._u
        K = self.constants.day_shift
        L = self.constants.year_shift

        # Renumber months from March, January and February move to the previous year
        j = m <= 2
        y1 = u.wrap(u.wrap(y + L) - j)
        m1 = m + 12 * j
        d1 = d - 1

        c = y1 // 100
        y_days = u.wrap(DAYS_IN_4_YEARS * y1) // 4 - c + c // 4
        m_days = (DOY_MUL * m1 - DOY_SUB) // 32

        N = u.wrap(y_days + m_days + d1)
        return self.rata_die_type.wrap(N - K)

    def info(self) -> Dict[str, Any]:
        out = super().info()
        out["constants"] = {
            "cycles": self.constants.cycles,
            "day_shift": self.constants.day_shift,
            "year_shift": self.constants.year_shift,
            "div_1461": {"multiplier": self._div_1461.multiplier, "max_dividend": self._div_1461.max_dividend},
        }
        return out


def ugregorian(year_type: IntType = UINT32, rata_die_type: IntType = UINT32) -> Gregorian:
    """Unsigned instantiation counting days from 0000-03-01 (no shift at all)."""
    return Gregorian(
        year_type,
        rata_die_type,
        COMPUTATIONAL_EPOCH,
        id=AlgorithmId("eaf", f"ugregorian-{year_type.name}-{rata_die_type.name}", "1"),
    )
