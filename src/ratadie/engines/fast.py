"""
ratadie.engines.fast
--------------------
Branch-free calendar predicates.

These trade the textbook remainder tests for a single multiply-and-compare
(see design.fast_division.DivisibilityTest). They accept Python ints or
int64 arrays. The default 32-bit test covers years in
[-536870800, 536870999]; pass a test derived for 64 bits to go wider on
Python ints.
"""

from __future__ import annotations

from ..design.fast_division import DivisibilityTest

BY_100_32 = DivisibilityTest.derive(100, 32)
BY_100_64 = DivisibilityTest.derive(100, 64)


def divisibility_for(lo: int, hi: int) -> DivisibilityTest:
    """Narrowest test by 100 whose valid range contains [lo, hi]."""
    for t in (BY_100_32, BY_100_64):
        if t.covers(lo) and t.covers(hi):
            return t
    raise ValueError(f"no divisibility test covers [{lo}, {hi}]")


def is_multiple_of_100(y, test: DivisibilityTest = BY_100_32):
    return test.test(y)


def is_leap_year(y, test: DivisibilityTest = BY_100_32):
    # Multiples of 100 must also be multiples of 400, hence of 16.
    return (y & (3 + 12 * is_multiple_of_100(y, test))) == 0


def last_day_of_month(y, m, test: DivisibilityTest = BY_100_32):
    # 31 for odd months up to July and even months from August, 30 otherwise.
    return (((m ^ (m >> 3)) & 1) | 30) - (m == 2) * (2 - is_leap_year(y, test))
