from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal

@dataclass(frozen=True)
class IntType:
    """
    Fixed-width two's-complement integer representation.

    wrap() reduces an unbounded integer to the representation the same way a
    C conversion would. It only uses +, - and &, so it applies unchanged to
    Python ints and to int64 numpy arrays (as long as x + 2^(bits-1) fits).
    """
    bits: int
    signed: bool

    def __post_init__(self) -> None:
        if not (8 <= self.bits <= 64):
            raise ValueError("bits must be in 8..64")

    @property
    def name(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.bits}"

    @property
    def mask(self) -> int:
        return (1 << self.bits) - 1

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else self.mask

    def contains(self, x: int) -> bool:
        return self.min <= x <= self.max

    def wrap(self, x):
        if self.signed:
            half = 1 << (self.bits - 1)
            return ((x + half) & self.mask) - half
        return x & self.mask

    def unsigned(self) -> "IntType":
        return IntType(self.bits, False)

    def __str__(self) -> str:
        return self.name


INT8 = IntType(8, True)
UINT8 = IntType(8, False)
INT16 = IntType(16, True)
UINT16 = IntType(16, False)
INT32 = IntType(32, True)
UINT32 = IntType(32, False)
INT64 = IntType(64, True)
UINT64 = IntType(64, False)


@dataclass(frozen=True, order=True)
class Date:
    """Proleptic Gregorian (year, month, day). Not validated: conversions out of bounds yield garbage."""
    year: int
    month: int
    day: int

    def __iter__(self):
        yield self.year
        yield self.month
        yield self.day

    def __str__(self) -> str:
        sign = "-" if self.year < 0 else ""
        return f"{sign}{abs(self.year):04d}-{self.month:02d}-{self.day:02d}"


UNIX_EPOCH = Date(1970, 1, 1)
# Day zero of the internal computation: leap days fall at the end of its years.
COMPUTATIONAL_EPOCH = Date(0, 3, 1)


def parse_date(s: str) -> Date:
    """Inverse of str(Date): '[+-]YYYY-MM-DD', any number of year digits."""
    s = s.strip()
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    parts = s.split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Not a date: {s!r} (expected [+-]YYYY-MM-DD)")
    y, m, d = map(int, parts)
    return Date(sign * y, m, d)


@dataclass(frozen=True)
class Bounds:
    """
    Inclusive ranges over which an instantiation is claimed correct.

    rata_die_min/max: to_date is correct on this range.
    date_min/max:     to_rata_die is correct on this range.
    round_*:          the intersection, where both directions agree.
    """
    rata_die_min: int
    rata_die_max: int
    date_min: Date
    date_max: Date
    round_rata_die_min: int
    round_rata_die_max: int
    round_date_min: Date
    round_date_max: Date

    def as_dict(self) -> Dict[str, Any]:
        return {
            "rata_die_min": self.rata_die_min,
            "rata_die_max": self.rata_die_max,
            "date_min": str(self.date_min),
            "date_max": str(self.date_max),
            "round_rata_die_min": self.round_rata_die_min,
            "round_rata_die_max": self.round_rata_die_max,
            "round_date_min": str(self.round_date_min),
            "round_date_max": str(self.round_date_max),
        }


@dataclass(frozen=True)
class AlgorithmId:
    family: Literal["eaf", "reference", "custom"]
    name: str
    version: str


@dataclass(frozen=True)
class AlgorithmSpec:
    """Pure data payload for constructing a conversion algorithm."""
    kind: Literal["gregorian", "baum", "glibc"]
    id: AlgorithmId
    year_type: IntType
    rata_die_type: IntType
    epoch: Date = UNIX_EPOCH
    meta: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @staticmethod
    def like(name: str) -> "AlgorithmSpec":
        from ..engines.specs import ALL_SPECS
        if name not in ALL_SPECS:
            raise KeyError(f"Unknown base spec '{name}'. Available: {sorted(ALL_SPECS)}")
        return ALL_SPECS[name]

    def tweak(self, **kwargs) -> "AlgorithmSpec":
        if "name" in kwargs:
            kwargs["id"] = replace(self.id, name=kwargs.pop("name"), family="custom")
        return replace(self, **kwargs)
