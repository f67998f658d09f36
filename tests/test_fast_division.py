# tests/test_fast_division.py

import pytest
import random

import numpy as np

from ratadie.core import calendar
from ratadie.core.errors import UnsupportedWidthError
from ratadie.design.fast_division import DivisibilityTest, FastDivider, main
from ratadie.engines import fast


def test_div_1461_constants():
    fd = FastDivider.derive(1461, 32)
    assert fd.multiplier == 2939745
    assert fd.max_dividend == 28824068
    # Enough for every remainder the conversion core feeds it
    assert fd.covers(146096 | 3)


def test_div_1461_exhaustive_over_cycle():
    fd = FastDivider.derive(1461, 32)
    x = np.arange(0, 146100, dtype=np.int64)
    q, r = fd.divmod(x)
    assert np.array_equal(q, x // 1461)
    assert np.array_equal(r, x % 1461)


def test_div_1461_max_dividend_is_tight():
    fd = FastDivider.derive(1461, 32)
    lo = fd.max_dividend - 100_000
    x = np.arange(lo, fd.max_dividend + 1, dtype=np.int64)
    q, r = fd.divmod(x)
    assert np.array_equal(q, x // 1461)
    assert np.array_equal(r, x % 1461)
    # The next quotient block already contains a wrong result
    nxt = range(fd.max_dividend + 1, fd.max_dividend + 1 + 1461)
    assert any(fd.divmod(x) != divmod(x, 1461) for x in nxt)


@pytest.mark.parametrize("divisor,bits", [(1461, 64), (146097, 64), (100, 32), (7, 16)])
def test_divider_random(divisor, bits):
    fd = FastDivider.derive(divisor, bits)
    random.seed(divisor + bits)
    for _ in range(5000):
        x = random.randint(0, fd.max_dividend)
        assert fd.divmod(x) == divmod(x, divisor)
    assert fd.divmod(fd.max_dividend) == divmod(fd.max_dividend, divisor)


def test_divider_needs_enough_bits():
    with pytest.raises(UnsupportedWidthError):
        FastDivider.derive(1461, 16)
    # The remainder of a 400-year cycle cannot be recovered from 32 low bits
    with pytest.raises(UnsupportedWidthError):
        FastDivider.derive(146097, 32)
    with pytest.raises(ValueError):
        FastDivider.derive(1024, 32)


def test_divisibility_by_100_constants():
    t = DivisibilityTest.derive(100, 32)
    assert t.multiplier == 42949673
    assert t.bound == 42949669
    assert t.max_dividend == 1073741799
    assert t.offset == 536870800
    assert t.valid_range == (-536870800, 536870999)


def test_divisibility_edges():
    t = DivisibilityTest.derive(100, 32)
    lo, hi = t.valid_range
    for x in list(range(lo, lo + 1000)) + list(range(hi - 1000, hi + 1)) + list(range(-1000, 1000)):
        assert t.test(x) == (x % 100 == 0), x


def test_divisibility_vectorised_sample():
    t = DivisibilityTest.derive(100, 32)
    rng = np.random.default_rng(1)
    x = rng.integers(-536870800, 536870999, size=1_000_000, endpoint=True)
    assert np.array_equal(t.test(x), x % 100 == 0)


@pytest.mark.slow
def test_divisibility_exhaustive():
    t = DivisibilityTest.derive(100, 32)
    lo, hi = t.valid_range
    step = 1 << 24
    for a in range(lo, hi + 1, step):
        x = np.arange(a, min(a + step, hi + 1), dtype=np.int64)
        assert np.array_equal(t.test(x), x % 100 == 0), a


def test_divisibility_needs_enough_bits():
    with pytest.raises(UnsupportedWidthError):
        DivisibilityTest.derive(100, 8)


# ------------------------------------------------------------
# Fast helpers against the trusted ones
# ------------------------------------------------------------

def test_fast_leap_years_match():
    y = np.arange(-40000, 40001, dtype=np.int64)
    assert np.array_equal(fast.is_leap_year(y), calendar.is_leap_year(y))
    for year in (-400, -100, -4, -1, 0, 1, 4, 100, 400, 1900, 2000, 2100):
        assert bool(fast.is_leap_year(year)) == bool(calendar.is_leap_year(year))


def test_fast_last_day_of_month_match():
    years = np.repeat(np.arange(-2000, 2001, dtype=np.int64), 12)
    months = np.tile(np.arange(1, 13, dtype=np.int64), 4001)
    want = np.array([calendar.last_day_of_month(int(y), int(m)) for y, m in zip(years, months)])
    assert np.array_equal(fast.last_day_of_month(years, months), want)


def test_fast_helpers_on_wide_years():
    t = fast.divisibility_for(2**40, 2**40 + 100)
    assert t is fast.BY_100_64
    for year in (2**40, 2**40 + 100, -(2**40) - 400, 10**15):
        assert bool(fast.is_leap_year(year, t)) == bool(calendar.is_leap_year(year))
    assert fast.divisibility_for(-100, 100) is fast.BY_100_32
    with pytest.raises(ValueError):
        fast.divisibility_for(0, 2**70)


def test_design_tool_prints_constants(capsys):
    assert main(["--divisor", "1461", "--bits", "32", "--verify", "200000"]) == 0
    out = capsys.readouterr().out
    assert "2939745" in out
    assert "28824068" in out
    assert "ok" in out


def test_design_tool_defaults_are_all_derivable(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "too few" not in out
    rows = [line.split("|") for line in out.splitlines() if line.count("|") >= 4]
    assert ["146097", "64"] in [[c.strip() for c in r[:2]] for r in rows]
    assert ["146097", "32"] not in [[c.strip() for c in r[:2]] for r in rows]
