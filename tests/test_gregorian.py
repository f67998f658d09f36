# tests/test_gregorian.py

import pytest
import random

import numpy as np

from ratadie.core.calendar import date_from, days_from
from ratadie.core.errors import UnsupportedWidthError
from ratadie.core.types import (
    COMPUTATIONAL_EPOCH, INT8, INT16, INT32, INT64, UINT16, UINT32, UNIX_EPOCH, Date,
)
from ratadie.engines.gregorian import (
    DOY_MUL, DOY_SUB, MONTH_ADD, MONTH_MUL, Gregorian, derive_constants, ugregorian,
)

# (name, year type, day count type, epoch, K, L, rata die range, date range, round rata die range)
FULL_16 = (Date(-32768, 1, 1), Date(32767, 12, 31))
INSTANTIATIONS = [
    ("s16 unix", INT16, INT32, UNIX_EPOCH, 536895458, 1468000,
     (-12687794, 11248737), FULL_16, (-12687794, 11248737)),
    ("s16 0000-03-01", INT16, INT32, Date(0, 3, 1), 536906475, 1470000,
     (-11968326, 11968205), FULL_16, (-11968326, 11968205)),
    ("s16 0000-01-01", INT16, INT32, Date(0, 1, 1), 536906415, 1470000,
     (-11968266, 11968265), FULL_16, (-11968266, 11968265)),
    ("s16 -0001-01-01", INT16, INT32, Date(-1, 1, 1), 536906050, 1470000,
     (-11967901, 11968630), FULL_16, (-11967901, 11968630)),
    ("s16 -0400-01-01", INT16, INT32, Date(-400, 1, 1), 536906415, 1470400,
     (-11822169, 12114362), FULL_16, (-11822169, 12114362)),
    ("s16 -1970-01-01", INT16, INT32, Date(-1970, 1, 1), 536917373, 1472000,
     (-11248739, 12687792), FULL_16, (-11248739, 12687792)),
    ("s16 -32768-01-01", INT16, INT32, Date(-32768, 1, 1), 536918103, 1502800,
     (0, 23936531), FULL_16, (0, 23936531)),
    ("u16", UINT16, UINT32, COMPUTATIONAL_EPOCH, 0, 0,
     (0, 23936471), (Date(0, 3, 1), Date(65535, 12, 31)), (0, 23936471)),
    ("u32", UINT32, UINT32, COMPUTATIONAL_EPOCH, 0, 0,
     (0, 1073741823), (Date(0, 3, 1), Date(2939745, 2, 28)), (0, 1073719812)),
    ("s32 unix", INT32, INT32, UNIX_EPOCH, 536895458, 1468000,
     (-536895458, 536846365), (Date(-1468000, 3, 1), Date(1471745, 2, 28)), (-536895458, 536824354)),
    ("s32 1912-06-23", INT32, INT32, Date(1912, 6, 23), 536874447, 1468000,
     (-536874447, 536867376), (Date(-1468000, 3, 1), Date(1471745, 2, 28)), (-536874447, 536845365)),
    ("s32 -1912-06-23", INT32, INT32, Date(-1912, 6, 23), 536938731, 1472000,
     (-536938731, 536803092), (Date(-1472000, 3, 1), Date(1467745, 2, 28)), (-536938731, 536781081)),
]


@pytest.fixture(scope="module")
def gregorian():
    return Gregorian(INT16, INT32)


# ------------------------------------------------------------
# Concrete scenarios
# ------------------------------------------------------------

def test_unix_epoch_scenarios(gregorian):
    assert gregorian.to_date(0) == Date(1970, 1, 1)
    assert gregorian.to_date(-719528) == Date(0, 1, 1)
    assert gregorian.to_rata_die(Date(1970, 1, 1)) == 0
    assert gregorian.to_date(11248737) == Date(32767, 12, 31)
    assert gregorian.bounds.date_max == Date(32767, 12, 31)


def test_leap_day_round_trip(gregorian):
    n = gregorian.to_rata_die(Date(2000, 2, 29))
    assert gregorian.to_date(n) == Date(2000, 2, 29)
    assert gregorian.to_rata_die(Date(2000, 3, 1)) - n == 1
    assert gregorian.to_rata_die(Date(1900, 3, 1)) - gregorian.to_rata_die(Date(1900, 2, 28)) == 1


def test_known_dates(gregorian):
    assert gregorian.to_rata_die(Date(2000, 1, 1)) == 10957
    assert gregorian.to_date(19716) == Date(2023, 12, 25)
    assert gregorian.to_rata_die(Date(1969, 12, 31)) == -1
    assert gregorian.to_rata_die(Date(0, 3, 1)) == -719468
    assert gregorian.to_date(-12687794) == Date(-32768, 1, 1)


def test_std_chrono_ranges(gregorian):
    # std::chrono::year_month_day must cover these day counts
    b = gregorian.bounds
    assert b.round_rata_die_min <= -12687428
    assert b.round_rata_die_max >= 11248737


def test_random_agreement_with_jdn(gregorian):
    random.seed(42)
    b = gregorian.bounds
    for _ in range(20000):
        n = random.randint(b.rata_die_min, b.rata_die_max)
        d = gregorian.to_date(n)
        assert d == date_from(UNIX_EPOCH, n)
        assert gregorian.to_rata_die(d) == n


def test_monotone_sample(gregorian):
    random.seed(3)
    b = gregorian.bounds
    ns = sorted(random.sample(range(b.rata_die_min, b.rata_die_max + 1), 5000))
    dates = [gregorian.to_date(n) for n in ns]
    assert dates == sorted(dates)


# ------------------------------------------------------------
# Month formulas
# ------------------------------------------------------------

# Computational month (March = 3 ... February = 14) and its first/last day of year
MONTH_TABLE = [
    (3, 0, 30), (4, 31, 60), (5, 61, 91), (6, 92, 121), (7, 122, 152), (8, 153, 183),
    (9, 184, 213), (10, 214, 244), (11, 245, 274), (12, 275, 305), (13, 306, 336), (14, 337, 365),
]


@pytest.mark.parametrize("month,first,last", MONTH_TABLE)
def test_month_formulas(month, first, last):
    assert (DOY_MUL * month - DOY_SUB) // 32 == first
    for r in range(first, last + 1):
        p = MONTH_MUL * r + MONTH_ADD
        assert p >> 16 == month
        assert (p & 0xFFFF) // MONTH_MUL == r - first


# ------------------------------------------------------------
# Constants and bounds
# ------------------------------------------------------------

@pytest.mark.parametrize(
    "label,year_type,rd_type,epoch,K,L,rd_range,date_range,round_range",
    INSTANTIATIONS,
    ids=[row[0] for row in INSTANTIATIONS],
)
def test_constants_and_bounds(label, year_type, rd_type, epoch, K, L, rd_range, date_range, round_range):
    algo = Gregorian(year_type, rd_type, epoch)
    assert algo.constants.day_shift == K
    assert algo.constants.year_shift == L
    assert algo.constants.year_shift == 400 * algo.constants.cycles

    b = algo.bounds
    assert (b.rata_die_min, b.rata_die_max) == rd_range
    assert (b.date_min, b.date_max) == date_range
    assert (b.round_rata_die_min, b.round_rata_die_max) == round_range
    assert b.round_date_min == algo.to_date(b.round_rata_die_min)
    assert b.round_date_max == algo.to_date(b.round_rata_die_max)


def test_constants_do_not_depend_on_year_type():
    a = derive_constants(INT32, UNIX_EPOCH)
    assert (a.day_shift, a.year_shift) == (536895458, 1468000)
    assert a.max_internal_day == 2**30 - 1
    assert a.max_internal_year == (2**32 - 1) // 1461


def test_unsigned_epoch_before_origin():
    # An unsigned count starting before 0000-03-01 shifts by whole cycles
    c = derive_constants(UINT32, Date(-1, 1, 1))
    assert c.cycles == 1
    assert c.day_shift == days_from(COMPUTATIONAL_EPOCH, Date(-1, 1, 1)) + 146097
    algo = Gregorian(INT16, UINT32, Date(-1, 1, 1))
    assert algo.to_date(0) == Date(-1, 1, 1)
    assert algo.to_rata_die(Date(1970, 1, 1)) == days_from(Date(-1, 1, 1), Date(1970, 1, 1))


def test_ugregorian():
    algo = ugregorian()
    assert algo.epoch == COMPUTATIONAL_EPOCH
    assert algo.to_date(0) == Date(0, 3, 1)
    assert algo.to_rata_die(Date(0, 3, 1)) == 0
    assert algo.to_date(1073719812) == Date(2939745, 2, 28)
    assert algo.id.name == "ugregorian-uint32-uint32"


def test_sixty_four_bits():
    algo = Gregorian(INT64, INT64)
    assert algo.to_date(0) == UNIX_EPOCH
    b = algo.bounds
    for n in (b.rata_die_min, b.rata_die_min + 1, -719528, 10**15, b.round_rata_die_max):
        d = algo.to_date(n)
        assert d == date_from(UNIX_EPOCH, n)
        assert algo.to_rata_die(d) == n


def test_unsupported_widths():
    with pytest.raises(UnsupportedWidthError):
        Gregorian(INT16, INT16)
    with pytest.raises(UnsupportedWidthError):
        Gregorian(INT64, INT32)
    # Narrow years are fine with an epoch they can hold
    assert Gregorian(INT8, INT32, Date(0, 1, 1)).bounds.date_max == Date(127, 12, 31)


def test_invalid_epoch():
    with pytest.raises(ValueError):
        Gregorian(INT16, INT32, Date(2023, 2, 29))


def test_epoch_outside_year_type():
    with pytest.raises(ValueError):
        Gregorian(INT8, INT32)
    with pytest.raises(ValueError):
        Gregorian(UINT16, INT32, Date(-5, 1, 1))
    algo = Gregorian(INT8, INT32, Date(-128, 1, 1))
    assert algo.to_date(0) == Date(-128, 1, 1)
    assert algo.bounds.rata_die_min == 0


# ------------------------------------------------------------
# Out of bounds and arrays
# ------------------------------------------------------------

def test_out_of_bounds_wraps_quietly(gregorian):
    # Past the 16-bit year the result wraps, it does not raise
    assert gregorian.to_date(11248738) == Date(-32768, 1, 1)
    for n in (INT32.min, INT32.max):
        d = gregorian.to_date(n)
        assert INT16.contains(d.year)
    assert INT32.contains(gregorian.to_rata_die(Date(32767, 12, 31)))


def test_array_matches_scalar(gregorian):
    rng = np.random.default_rng(5)
    b = gregorian.bounds
    n = rng.integers(b.rata_die_min, b.rata_die_max, size=10000, endpoint=True)
    y, m, d = gregorian.to_date_array(n)
    for i in range(0, 10000, 97):
        assert gregorian.to_date(int(n[i])) == Date(int(y[i]), int(m[i]), int(d[i]))
    assert np.array_equal(gregorian.to_rata_die_array(y, m, d), n)


def test_info(gregorian):
    info = gregorian.info()
    assert info["year_type"] == "int16"
    assert info["rata_die_type"] == "int32"
    assert info["epoch"] == "1970-01-01"
    assert info["bounds"]["date_min"] == "-32768-01-01"
    assert info["constants"]["day_shift"] == 536895458
    assert info["constants"]["div_1461"]["multiplier"] == 2939745
