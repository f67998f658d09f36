"""
ratadie.engines.baum
--------------------
Peter Baum's "Date Algorithms" (sections 5.1 and 6.2.1/3), adjusted to the
unix epoch, with 16-bit years and 32-bit day counts.

Kept as a comparison baseline. The C integer semantics are reproduced
exactly (truncating signed division, wrapping 32-bit unsigned arithmetic)
so that the declared bounds are the real ones.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from ..core.types import INT16, INT32, UINT32, UNIX_EPOCH, AlgorithmId, Bounds, Date
from .interfaces import FieldAlgorithm

# Day count of 0000-03-01 relative to 1970-01-01, minus one.
UNIX_SHIFT = 719469

BAUM_BOUNDS = Bounds(
    rata_die_min=-719468,
    rata_die_max=11248737,
    date_min=Date(0, 3, 1),
    date_max=Date(32767, 12, 31),
    round_rata_die_min=-719468,
    round_rata_die_max=11248737,
    round_date_min=Date(0, 3, 1),
    round_date_max=Date(32767, 12, 31),
)


def _tdiv(a, b: int):
    """C division (truncates toward zero) for positive b."""
    return (a + (b - 1) * (a < 0)) // b


class Baum(FieldAlgorithm):

    def __init__(self, *, id: Optional[AlgorithmId] = None):
        self.id = id or AlgorithmId("reference", "baum", "2017")
        self.year_type = INT16
        self.rata_die_type = INT32
        self.epoch = UNIX_EPOCH
        self.bounds = BAUM_BOUNDS

    def to_rata_die_fields(self, y, m, d) -> Any:
        j = m < 3
        z = y - j
        m = m + 12 * j
        f = (979 * m - 2918) // 32
        days = d + f + 365 * z + _tdiv(z, 4) - _tdiv(z, 100) + _tdiv(z, 400) - UNIX_SHIFT
        return INT32.wrap(days)

    def to_date_fields(self, n) -> Tuple[Any, Any, Any]:
        u = UINT32
        z = u.wrap(u.wrap(n) + UNIX_SHIFT)
        h = u.wrap(100 * z - 25)
        a = h // 3652425
        b = a - a // 4
        y_ = u.wrap(100 * b + h) // 36525
        c = u.wrap(b + z - 365 * y_ - y_ // 4)
        m_ = u.wrap(535 * c + 48950) // 16384
        d = u.wrap(c - u.wrap(979 * m_ - 2918) // 32)
        j = m_ > 12
        return INT16.wrap(u.wrap(y_ + j)), u.wrap(m_ - 12 * j), d
