"""
ratadie.diagnostics.validator
-----------------------------
Boundary and round-trip validation of a conversion algorithm.

Given an algorithm and the bounds it declares, the checks below establish
empirically that

  * day 0 is the epoch;
  * the round-trip bounds are consistent with each other;
  * each declared bound is tight: one step beyond it, either the value is
    not representable or the successor relation breaks;
  * to_rata_die(to_date(n)) == n and to_date(to_rata_die(x)) == x over the
    round-trip ranges;
  * walking day by day from the epoch to each bound, to_date agrees with an
    independent calendar walk and to_rata_die with plain counting.

Each check stops at its first divergence. Ascending sweeps therefore report
the lowest failing value and descending sweeps (epoch -> lower bound) the
failing value closest to the epoch.

Sweeps are vectorised with numpy, chunk by chunk. With window=None they are
exhaustive; with window=w each sweep is restricted to w values next to the
epoch and next to each bound, which makes 64-bit day counts checkable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import numpy as np

from ..core.calendar import (
    date_from, days_from, is_valid_date, max_date, min_date, next_date, previous_date,
)
from ..core.engine import ConversionAlgorithm
from ..core.errors import ValidationError
from ..core.types import Date
from .sweep import (
    DEFAULT_CHUNK_SIZE, date_chunks, first_false, int_chunks, is_successor, require_sweepable,
)

logger = logging.getLogger(__name__)


# ============================================================
# Results
# ============================================================

@dataclass(frozen=True)
class Failure:
    """First divergence found by a check."""
    check: str
    message: str
    at: Any          # the offending day count or date
    expected: Any
    actual: Any


@dataclass(frozen=True)
class CheckResult:
    name: str
    ok: bool
    checked: int
    failure: Optional[Failure] = None


@dataclass
class ValidationReport:
    algorithm: str
    results: List[CheckResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def failures(self) -> List[Failure]:
        return [r.failure for r in self.results if r.failure is not None]

    @property
    def first_failure(self) -> Optional[Failure]:
        fs = self.failures
        return fs[0] if fs else None

    @property
    def checked(self) -> int:
        return sum(r.checked for r in self.results)

    def summary(self) -> str:
        lines = [f"{self.algorithm}: {'OK' if self.ok else 'FAILED'}"]
        for r in self.results:
            if r.ok:
                lines.append(f"  [ok]   {r.name} ({r.checked} checked)")
            else:
                lines.append(f"  [FAIL] {r.name}: {r.failure.message}")
        return "\n".join(lines)

    def raise_for_failure(self) -> None:
        if not self.ok:
            raise ValidationError(self.algorithm, self.first_failure)


def _passed(name: str, checked: int) -> CheckResult:
    logger.debug("%s: ok (%d checked)", name, checked)
    return CheckResult(name, True, checked)


def _failed(name: str, checked: int, at: Any, expected: Any, actual: Any, what: str) -> CheckResult:
    message = f"failed for {what} = {at}: expected {expected}, got {actual}"
    logger.warning("%s: %s", name, message)
    return CheckResult(name, False, checked, Failure(name, message, at, expected, actual))


def _date(y, m, d) -> Date:
    return Date(int(y), int(m), int(d))


# ============================================================
# Scalar checks
# ============================================================

def check_epoch(algo: ConversionAlgorithm) -> CheckResult:
    name = "epoch"
    got = algo.to_date(0)
    if got != algo.epoch:
        return _failed(name, 1, 0, algo.epoch, got, "rata_die")
    n = algo.to_rata_die(algo.epoch)
    if n != 0:
        return _failed(name, 2, algo.epoch, 0, n, "date")
    return _passed(name, 2)


def check_round_bounds(algo: ConversionAlgorithm) -> CheckResult:
    """The round-trip bounds map onto each other and lie inside the one-way bounds."""
    name = "round_bounds"
    b = algo.bounds

    if not (b.rata_die_min <= b.round_rata_die_min <= b.round_rata_die_max <= b.rata_die_max):
        return _failed(name, 0, "round_rata_die_min/max",
                       f"within [{b.rata_die_min}, {b.rata_die_max}]",
                       f"[{b.round_rata_die_min}, {b.round_rata_die_max}]", "bound")
    if not (b.date_min <= b.round_date_min <= b.round_date_max <= b.date_max):
        return _failed(name, 0, "round_date_min/max",
                       f"within [{b.date_min}, {b.date_max}]",
                       f"[{b.round_date_min}, {b.round_date_max}]", "bound")

    pairs = (
        (b.round_date_min, b.round_rata_die_min),
        (b.round_date_max, b.round_rata_die_max),
    )
    checked = 0
    for date, n in pairs:
        got = algo.to_rata_die(date)
        checked += 1
        if got != n:
            return _failed(name, checked, date, n, got, "date")
    for date, n in pairs:
        got = algo.to_date(n)
        checked += 1
        if got != date:
            return _failed(name, checked, n, date, got, "rata_die")
    return _passed(name, checked)


def check_tightness(algo: ConversionAlgorithm) -> CheckResult:
    """
    A bound is tight when it is the type's limit, when the value it converts to
    is the other type's limit, or when one step beyond it the successor
    relation no longer holds.
    """
    name = "tightness"
    b = algo.bounds
    R = algo.rata_die_type
    lowest, highest = min_date(algo.year_type), max_date(algo.year_type)

    first = algo.to_date(b.rata_die_min)
    last = algo.to_date(b.rata_die_max)
    for n, got in ((b.rata_die_min, first), (b.rata_die_max, last)):
        if not is_valid_date(got):
            return _failed(name, 0, n, "a valid date", got, "rata_die")

    if not (b.rata_die_min == R.min or first == lowest):
        got = algo.to_date(b.rata_die_min - 1)
        if got == previous_date(first):
            return _failed(name, 1, b.rata_die_min - 1, f"not {previous_date(first)}", got, "rata_die")

    if not (b.rata_die_max == R.max or last == highest):
        got = algo.to_date(b.rata_die_max + 1)
        if got == next_date(last):
            return _failed(name, 2, b.rata_die_max + 1, f"not {next_date(last)}", got, "rata_die")

    first_n = algo.to_rata_die(b.date_min)
    if not (b.date_min == lowest or first_n == R.min):
        got = algo.to_rata_die(previous_date(b.date_min))
        if got == first_n - 1:
            return _failed(name, 3, previous_date(b.date_min), f"not {first_n - 1}", got, "date")

    last_n = algo.to_rata_die(b.date_max)
    if not (b.date_max == highest or last_n == R.max):
        got = algo.to_rata_die(next_date(b.date_max))
        if got == last_n + 1:
            return _failed(name, 4, next_date(b.date_max), f"not {last_n + 1}", got, "date")

    return _passed(name, 4)


# ============================================================
# Sweeps
# ============================================================

def check_round_trip(algo, lo: int, hi: int, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> CheckResult:
    """to_rata_die(to_date(n)) == n for every n in [lo, hi]."""
    name = f"round_trip [{lo}, {hi}]"
    checked = 0
    for n in int_chunks(lo, hi, chunk_size):
        y, m, d = algo.to_date_array(n)
        back = algo.to_rata_die_array(y, m, d)
        i = first_false(back == n)
        if i >= 0:
            return _failed(name, checked + i, int(n[i]), int(n[i]), int(back[i]), "rata_die")
        checked += n.size
    return _passed(name, checked)


def check_date_round_trip(algo, first: Date, last: Date, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> CheckResult:
    """to_date(to_rata_die(x)) == x for every date x in [first, last]."""
    name = f"date_round_trip [{first}, {last}]"
    checked = 0
    for y, m, d in date_chunks(first, last, chunk_size):
        n = algo.to_rata_die_array(y, m, d)
        y2, m2, d2 = algo.to_date_array(n)
        i = first_false((y2 == y) & (m2 == m) & (d2 == d))
        if i >= 0:
            return _failed(name, checked + i, _date(y[i], m[i], d[i]), _date(y[i], m[i], d[i]),
                           _date(y2[i], m2[i], d2[i]), "date")
        checked += y.size
    return _passed(name, checked)


def check_to_date_walk(algo, start: int, stop: int, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> CheckResult:
    """
    to_date(start) is checked against the trusted day count helpers; from
    there every step towards stop must move to the next (or previous)
    calendar day.
    """
    forward = stop >= start
    name = f"to_date_walk {start} -> {stop}"

    anchor = algo.to_date(start)
    expected = date_from(algo.epoch, start)
    if anchor != expected:
        return _failed(name, 1, start, expected, anchor, "rata_die")
    if start == stop:
        return _passed(name, 1)

    checked = 1
    step = 1 if forward else -1
    prev = tuple(np.array([v], dtype=np.int64) for v in anchor)
    for n in int_chunks(start + step, stop, chunk_size):
        y, m, d = algo.to_date_array(n)
        y0 = np.concatenate((prev[0], y[:-1]))
        m0 = np.concatenate((prev[1], m[:-1]))
        d0 = np.concatenate((prev[2], d[:-1]))
        if forward:
            ok = is_successor(y0, m0, d0, y, m, d)
        else:
            ok = is_successor(y, m, d, y0, m0, d0)
        i = first_false(ok)
        if i >= 0:
            before = _date(y0[i], m0[i], d0[i])
            want = next_date(before) if forward else previous_date(before)
            return _failed(name, checked + i, int(n[i]), want, _date(y[i], m[i], d[i]), "rata_die")
        checked += n.size
        prev = (y[-1:], m[-1:], d[-1:])
    return _passed(name, checked)


def check_to_rata_die_walk(algo, start: Date, stop: Date, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> CheckResult:
    """
    to_rata_die(start) is checked against the trusted day count helpers;
    dates enumerated from there towards stop must map to consecutive
    day counts.
    """
    forward = stop >= start
    name = f"to_rata_die_walk {start} -> {stop}"

    anchor = algo.to_rata_die(start)
    expected = days_from(algo.epoch, start)
    if anchor != expected:
        return _failed(name, 1, start, expected, anchor, "date")

    checked = 0
    step = 1 if forward else -1
    prev = anchor
    for y, m, d in date_chunks(start, stop, chunk_size):
        n = algo.to_rata_die_array(y, m, d)
        if checked == 0:
            # The first chunk begins with start itself.
            y, m, d, n = y[1:], m[1:], d[1:], n[1:]
            checked = 1
            if n.size == 0:
                continue
        want = prev + step + step * np.arange(n.size, dtype=np.int64)
        i = first_false(n == want)
        if i >= 0:
            return _failed(name, checked + i, _date(y[i], m[i], d[i]), int(want[i]), int(n[i]), "date")
        checked += n.size
        prev = int(n[-1])
    return _passed(name, max(checked, 1))


# ============================================================
# Driver
# ============================================================

def _clip(lo: int, hi: int, a: int, b: int) -> Tuple[int, int]:
    return max(lo, a), min(hi, b)


def _clip_dates(lo: Date, hi: Date, a: Date, b: Date) -> Tuple[Date, Date]:
    return max(lo, a), min(hi, b)


def validate(
    algo: ConversionAlgorithm,
    *,
    window: Optional[int] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    fail_fast: bool = False,
) -> ValidationReport:
    """
    Run every check on algo. window=None sweeps the whole declared ranges;
    window=w restricts each sweep to w values next to the epoch and to each
    bound. With fail_fast the run stops after the first failing check.
    """
    if window is not None and window < 1:
        raise ValueError("window must be positive")
    require_sweepable(algo, full=window is None)

    b = algo.bounds
    epoch = algo.epoch
    report = ValidationReport(algo.id.name)
    logger.info("validating %s (window=%s)", algo.id.name, window)

    plan = [
        lambda: check_epoch(algo),
        lambda: check_round_bounds(algo),
        lambda: check_tightness(algo),
    ]

    rr = (b.round_rata_die_min, b.round_rata_die_max)
    rd = (b.round_date_min, b.round_date_max)
    if window is None:
        n_ranges = [rr]
        d_ranges = [rd]
        up_walks = [(0, b.rata_die_max)]
        down_walks = [(0, b.rata_die_min)]
        date_up = [(epoch, b.date_max)]
        date_down = [(epoch, b.date_min)]
    else:
        w = window
        n_ranges = [
            _clip(*rr, -w, w),
            _clip(*rr, rr[0], rr[0] + w),
            _clip(*rr, rr[1] - w, rr[1]),
        ]
        d_ranges = [
            _clip_dates(*rd, date_from(epoch, -w), date_from(epoch, w)),
            _clip_dates(*rd, rd[0], date_from(rd[0], w)),
            _clip_dates(*rd, date_from(rd[1], -w), rd[1]),
        ]
        up_walks = [(0, min(w, b.rata_die_max)), (max(b.rata_die_max - w, 0), b.rata_die_max)]
        down_walks = [(0, max(-w, b.rata_die_min)), (min(b.rata_die_min + w, 0), b.rata_die_min)]
        date_up = [
            (epoch, min(date_from(epoch, w), b.date_max)),
            (max(date_from(b.date_max, -w), epoch), b.date_max),
        ]
        date_down = [
            (epoch, max(date_from(epoch, -w), b.date_min)),
            (min(date_from(b.date_min, w), epoch), b.date_min),
        ]

    for lo, hi in n_ranges:
        if lo <= hi:
            plan.append(lambda lo=lo, hi=hi: check_round_trip(algo, lo, hi, chunk_size=chunk_size))
    for first, last in d_ranges:
        if first <= last:
            plan.append(lambda first=first, last=last: check_date_round_trip(algo, first, last, chunk_size=chunk_size))
    for start, stop in up_walks + down_walks:
        plan.append(lambda start=start, stop=stop: check_to_date_walk(algo, start, stop, chunk_size=chunk_size))
    for start, stop in date_up + date_down:
        plan.append(lambda start=start, stop=stop: check_to_rata_die_walk(algo, start, stop, chunk_size=chunk_size))

    for run in plan:
        result = run()
        report.results.append(result)
        if fail_fast and not result.ok:
            break

    if report.ok:
        logger.info("%s: all %d checks passed (%d values)", algo.id.name, len(report.results), report.checked)
    else:
        logger.warning("%s: %d of %d checks failed", algo.id.name, len(report.failures), len(report.results))
    return report
