# design/fast_division.py

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ratadie.core.errors import UnsupportedWidthError


@dataclass(frozen=True)
class FastDivider:
    """
    Division by a constant d replaced by one multiplication and a shift.

    With b = 2^k // d + 1 and e = b*d - 2^k (0 < e <= d), the product b*x
    splits as  b*x = q*2^k + lo  with  q = x // d  and  x % d = lo // b,
    as long as the accumulated error e*q stays below b and the low part
    b*(d-1) + e*q stays below 2^k. max_dividend is the largest x for which
    both conditions hold for every smaller x as well.
    """
    divisor: int
    bits: int
    multiplier: int
    max_dividend: int

    @classmethod
    def derive(cls, divisor: int, bits: int) -> "FastDivider":
        if divisor < 2:
            raise ValueError("divisor must be >= 2")
        if (divisor & (divisor - 1)) == 0:
            raise ValueError("divisor is a power of two; use a shift")
        two_k = 1 << bits
        b = two_k // divisor + 1
        e = b * divisor - two_k
        q_max = min((b - 1) // e, (two_k - 1 - b * (divisor - 1)) // e)
        if q_max < 0:
            raise UnsupportedWidthError(f"{bits} bits are too few to divide by {divisor}")
        return cls(divisor, bits, b, divisor * (q_max + 1) - 1)

    @property
    def mask(self) -> int:
        return (1 << self.bits) - 1

    def covers(self, x: int) -> bool:
        return 0 <= x <= self.max_dividend

    def divmod(self, x):
        """(x // d, x % d) for 0 <= x <= max_dividend. Works elementwise on int64 arrays when b*x fits."""
        p = self.multiplier * x
        return p >> self.bits, (p & self.mask) // self.multiplier


@dataclass(frozen=True)
class DivisibilityTest:
    """
    "x is a multiple of d" as a single multiply-and-compare.

    For 0 <= x <= max_dividend, (multiplier * x) mod 2^k < bound exactly
    when d divides x. Signed operands are handled by adding offset, a
    multiple of d close to max_dividend / 2, which centres the valid range
    on zero: [-offset, max_dividend - offset].
    """
    divisor: int
    bits: int
    multiplier: int
    bound: int
    max_dividend: int
    offset: int

    @classmethod
    def derive(cls, divisor: int, bits: int) -> "DivisibilityTest":
        if divisor < 2:
            raise ValueError("divisor must be >= 2")
        two_k = 1 << bits
        mult = two_k // divisor + 1
        e = mult * divisor - two_k
        k_max = (two_k - 1 - (divisor - 1) * mult) // e
        if e * k_max >= mult:
            k_max = (mult - 1) // e
        if k_max < 0:
            raise UnsupportedWidthError(f"{bits} bits are too few to test divisibility by {divisor}")
        max_dividend = divisor * k_max + divisor - 1
        offset = max_dividend // 2 // divisor * divisor
        return cls(divisor, bits, mult, e * k_max + 1, max_dividend, offset)

    @property
    def mask(self) -> int:
        return (1 << self.bits) - 1

    @property
    def valid_range(self) -> Tuple[int, int]:
        return -self.offset, self.max_dividend - self.offset

    def covers(self, x: int) -> bool:
        lo, hi = self.valid_range
        return lo <= x <= hi

    def test(self, x):
        return ((self.multiplier * (x + self.offset)) & self.mask) < self.bound


# ============================================================
# Design tool
# ============================================================

def _verify_divider(fd: FastDivider, limit: int) -> Optional[int]:
    """First x in [0, limit] where fd.divmod disagrees with divmod, else None."""
    for x in range(limit + 1):
        if fd.divmod(x) != divmod(x, fd.divisor):
            return x
    return None


DEFAULT_DIVIDERS = [(1461, 32), (1461, 64), (146097, 64), (100, 32), (100, 64)]


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Derive multiply-and-shift constants for division by a constant.")
    p.add_argument("--divisor", type=int, action="append", default=[], help="Divisor (repeatable). Default: 1461 and 100 at 32 and 64 bits, 146097 at 64 bits only.")
    p.add_argument("--bits", type=int, action="append", default=[], help="Word size k (repeatable). Default: 32, 64.")
    p.add_argument("--verify", type=int, default=0, help="Brute-force check dividers on [0, N] (N capped at max_dividend).")
    args = p.parse_args(argv)

    if args.divisor or args.bits:
        pairs = [(d, k) for d in (args.divisor or [1461, 146097, 100]) for k in (args.bits or [32, 64])]
        tests = pairs
    else:
        # 32 low bits are too few for the remainder of a 400-year cycle
        pairs = DEFAULT_DIVIDERS
        tests = [(100, 32), (100, 64)]

    lines = []
    lines.append("Fast division: x // d == (b * x) >> k,  x % d == ((b * x) mod 2^k) // b")
    lines.append("=" * 100)
    lines.append(f"{'d':>8} | {'k':>3} | {'b':>22} | {'max dividend':>22} | check")
    lines.append("-" * 100)
    for d, k in pairs:
        try:
            fd = FastDivider.derive(d, k)
        except (ValueError, UnsupportedWidthError) as exc:
            lines.append(f"{d:>8} | {k:>3} | {'-':>22} | {'-':>22} | {exc}")
            continue
        check = ""
        if args.verify:
            bad = _verify_divider(fd, min(args.verify, fd.max_dividend))
            check = "ok" if bad is None else f"FAIL at {bad}"
        lines.append(f"{d:>8} | {k:>3} | {fd.multiplier:>22} | {fd.max_dividend:>22} | {check}")

    lines.append("")
    lines.append("Divisibility: d | x  <=>  (b * (x + offset)) mod 2^k < bound")
    lines.append("=" * 100)
    lines.append(f"{'d':>8} | {'k':>3} | {'b':>22} | {'bound':>22} | {'offset':>22} | valid range")
    lines.append("-" * 100)
    for d, k in tests:
        try:
            dt = DivisibilityTest.derive(d, k)
        except (ValueError, UnsupportedWidthError) as exc:
            lines.append(f"{d:>8} | {k:>3} | {exc}")
            continue
        lo, hi = dt.valid_range
        lines.append(f"{d:>8} | {k:>3} | {dt.multiplier:>22} | {dt.bound:>22} | {dt.offset:>22} | [{lo}, {hi}]")

    print("\n".join(lines))
    return 0

if __name__ == "__main__":
    sys.exit(main())
