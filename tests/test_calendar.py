# tests/test_calendar.py

import pytest
import random

from ratadie.core.calendar import (
    date_from, days_from, from_jdn, is_leap_year, is_valid_date, last_day_of_month,
    max_date, min_date, next_date, previous_date, to_jdn,
)
from ratadie.core.types import (
    COMPUTATIONAL_EPOCH, INT16, INT32, UINT16, UINT32, UNIX_EPOCH, Date, IntType, parse_date,
)


def test_leap_years():
    assert is_leap_year(2000)
    assert is_leap_year(2024)
    assert is_leap_year(0)
    assert is_leap_year(-4)
    assert is_leap_year(-400)
    assert not is_leap_year(1900)
    assert not is_leap_year(2023)
    assert not is_leap_year(-1)
    assert not is_leap_year(-100)


def test_last_day_of_month():
    assert [last_day_of_month(2023, m) for m in range(1, 13)] == [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
    assert last_day_of_month(2024, 2) == 29
    assert last_day_of_month(1900, 2) == 28
    assert last_day_of_month(-1, 2) == 28
    assert last_day_of_month(-4, 2) == 29


def test_next_and_previous_at_boundaries():
    assert next_date(Date(2023, 2, 28)) == Date(2023, 3, 1)
    assert next_date(Date(2024, 2, 28)) == Date(2024, 2, 29)
    assert next_date(Date(2024, 2, 29)) == Date(2024, 3, 1)
    assert next_date(Date(-1, 12, 31)) == Date(0, 1, 1)
    assert previous_date(Date(0, 1, 1)) == Date(-1, 12, 31)
    assert previous_date(Date(2000, 3, 1)) == Date(2000, 2, 29)
    assert previous_date(Date(2023, 5, 1)) == Date(2023, 4, 30)
    # Years are unbounded: no wrap at the type limits
    assert next_date(Date(32767, 12, 31)) == Date(32768, 1, 1)
    assert previous_date(Date(-32768, 1, 1)) == Date(-32769, 12, 31)


def test_next_previous_inverse():
    random.seed(7)
    for _ in range(2000):
        d = from_jdn(random.randint(-10_000_000, 10_000_000))
        assert previous_date(next_date(d)) == d
        assert next_date(previous_date(d)) == d


def test_known_jdn():
    assert to_jdn(Date(2000, 1, 1)) == 2451545
    assert to_jdn(UNIX_EPOCH) == 2440588
    assert days_from(UNIX_EPOCH, Date(0, 1, 1)) == -719528
    assert days_from(COMPUTATIONAL_EPOCH, UNIX_EPOCH) == 719468
    assert date_from(UNIX_EPOCH, 11248737) == Date(32767, 12, 31)


def test_jdn_roundtrip():
    random.seed(42)
    for _ in range(10000):
        jdn_in = random.randint(-2_000_000_000, 2_000_000_000)
        d = from_jdn(jdn_in)
        assert is_valid_date(d)
        assert to_jdn(d) == jdn_in


def test_jdn_consecutive():
    d = Date(-5, 1, 1)
    j = to_jdn(d)
    for _ in range(5000):
        d = next_date(d)
        j += 1
        assert to_jdn(d) == j


def test_valid_dates():
    assert is_valid_date(Date(2024, 2, 29))
    assert not is_valid_date(Date(2023, 2, 29))
    assert not is_valid_date(Date(2023, 13, 1))
    assert not is_valid_date(Date(2023, 4, 0))


def test_sentinels():
    assert min_date(INT16) == Date(-32768, 1, 1)
    assert max_date(INT16) == Date(32767, 12, 31)
    assert min_date(UINT16) == Date(0, 1, 1)
    assert max_date(UINT16) == Date(65535, 12, 31)


# ------------------------------------------------------------
# Types
# ------------------------------------------------------------

def test_int_type_limits_and_wrap():
    assert (INT32.min, INT32.max) == (-2**31, 2**31 - 1)
    assert (UINT32.min, UINT32.max) == (0, 2**32 - 1)
    assert INT16.wrap(32768) == -32768
    assert INT16.wrap(-32769) == 32767
    assert UINT32.wrap(-1) == 2**32 - 1
    assert UINT32.wrap(2**32 + 5) == 5
    assert INT32.unsigned() == UINT32
    assert str(INT16) == "int16"
    with pytest.raises(ValueError):
        IntType(4, True)


def test_date_order_and_str():
    assert Date(-1, 12, 31) < Date(0, 1, 1) < Date(0, 1, 2) < Date(0, 2, 1)
    assert str(Date(1970, 1, 1)) == "1970-01-01"
    assert str(Date(-1, 1, 1)) == "-0001-01-01"
    assert str(Date(-1468000, 3, 1)) == "-1468000-03-01"
    assert tuple(Date(2000, 2, 29)) == (2000, 2, 29)


@pytest.mark.parametrize("d", [Date(1970, 1, 1), Date(-1, 1, 1), Date(-32768, 1, 1), Date(2939745, 2, 28)])
def test_parse_date_inverts_str(d):
    assert parse_date(str(d)) == d


def test_parse_date_rejects_garbage():
    with pytest.raises(ValueError):
        parse_date("1970/01/01")
    with pytest.raises(ValueError):
        parse_date("yesterday")
