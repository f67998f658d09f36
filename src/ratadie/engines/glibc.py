"""
ratadie.engines.glibc
---------------------
The GNU C library's algorithms: date -> days from mktime.c (ydhms_diff),
days -> date from offtime.c (year guessing loop plus a month table scan).
16-bit years, 32-bit day counts, unix epoch.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

from ..core.types import INT16, INT32, UNIX_EPOCH, AlgorithmId, Bounds, Date
from .interfaces import FieldAlgorithm

EPOCH_YEAR = 1970
TM_YEAR_BASE = 1900

# Days before the first of each month (and the year length), normal/leap.
MON_YDAY = np.array(
    [
        [0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334, 365],
        [0, 31, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335, 366],
    ],
    dtype=np.int64,
)

GLIBC_BOUNDS = Bounds(
    rata_die_min=-12687794,
    rata_die_max=11248737,
    date_min=Date(-32768, 1, 1),
    date_max=Date(32767, 12, 31),
    round_rata_die_min=-12687794,
    round_rata_die_max=11248737,
    round_date_min=Date(-32768, 1, 1),
    round_date_max=Date(32767, 12, 31),
)


def leapyear(year):
    """mktime.c's test on a year counted from 1900."""
    return ((year & 3) == 0) & ((year % 100 != 0) | (((year // 100) & 3) == (-(TM_YEAR_BASE // 100) & 3)))


def isleap(year) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def ydhms_diff(year1, yday1, year0):
    """Days from Jan 1st of year0 to day yday1 of year1 (years counted from 1900)."""
    a4 = (year1 >> 2) + (TM_YEAR_BASE >> 2) - ((year1 & 3) == 0)
    b4 = (year0 >> 2) + (TM_YEAR_BASE >> 2) - ((year0 & 3) == 0)
    a100 = a4 // 25
    b100 = b4 // 25
    a400 = a100 >> 2
    b400 = b100 >> 2
    intervening_leap_days = (a4 - b4) - (a100 - b100) + (a400 - b400)
    return 365 * (year1 - year0) + yday1 + intervening_leap_days


def _leaps_thru_end_of(y: int) -> int:
    return y // 4 - y // 100 + y // 400


class Glibc(FieldAlgorithm):

    # offtime loops until the guessed year holds the day
    vectorized_to_date = False

    def __init__(self, *, id: Optional[AlgorithmId] = None):
        self.id = id or AlgorithmId("reference", "glibc", "2.31")
        self.year_type = INT16
        self.rata_die_type = INT32
        self.epoch = UNIX_EPOCH
        self.bounds = GLIBC_BOUNDS

    def to_rata_die_fields(self, y, m, d) -> Any:
        year = y - TM_YEAR_BASE
        mon_yday = MON_YDAY[leapyear(year) * 1, m - 1] - 1
        return INT32.wrap(ydhms_diff(year, mon_yday + d, EPOCH_YEAR - TM_YEAR_BASE))

    def to_date_fields(self, n) -> Tuple[Any, Any, Any]:
        days = int(n)
        y = EPOCH_YEAR
        while days < 0 or days >= (366 if isleap(y) else 365):
            # Guess a corrected year, assuming 365 days per year
            yg = y + days // 365
            days -= (yg - y) * 365 + _leaps_thru_end_of(yg - 1) - _leaps_thru_end_of(y - 1)
            y = yg

        ip = MON_YDAY[int(isleap(y))]
        m = 11
        while days < ip[m]:
            m -= 1
        days -= int(ip[m])
        return INT16.wrap(y), m + 1, days + 1
