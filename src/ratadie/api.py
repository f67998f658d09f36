from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from .core.engine import ConversionAlgorithm, AlgorithmRegistry
from .core.types import AlgorithmSpec, Bounds, Date, parse_date
from .diagnostics.sweep import DEFAULT_CHUNK_SIZE
from .diagnostics.validator import ValidationReport, validate as _validate
from .engines import fast
from .engines.factory import make_algorithm as _make_algorithm

DateLike = Union[Date, Tuple[int, int, int], str]

_registry: Optional[AlgorithmRegistry] = None

def set_registry(reg: AlgorithmRegistry) -> None:
    global _registry
    _registry = reg

def _reg() -> AlgorithmRegistry:
    if _registry is None:
        raise RuntimeError("Algorithm registry not initialized")
    return _registry

def _as_date(d: DateLike) -> Date:
    if isinstance(d, Date):
        return d
    if isinstance(d, str):
        return parse_date(d)
    y, m, day = d
    return Date(y, m, day)

def list_algorithms() -> List[str]:
    return _reg().list()

def algorithm_info(algorithm: str) -> Dict[str, Any]:
    return _reg().get(algorithm).info()

def get_algorithm(algorithm: str = "gregorian") -> ConversionAlgorithm:
    return _reg().get(algorithm)

def bounds(algorithm: str = "gregorian") -> Bounds:
    return _reg().get(algorithm).bounds

def to_date(n: int, *, algorithm: str = "gregorian") -> Date:
    """Date for day count n. Outside bounds(algorithm) the result is unspecified."""
    return _reg().get(algorithm).to_date(n)

def to_rata_die(d: DateLike, *, algorithm: str = "gregorian") -> int:
    """Day count for d. Outside bounds(algorithm) the result is unspecified."""
    return _reg().get(algorithm).to_rata_die(_as_date(d))

def validate(
    algorithm: str = "gregorian",
    *,
    window: Optional[int] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    fail_fast: bool = False,
) -> ValidationReport:
    return _validate(_reg().get(algorithm), window=window, chunk_size=chunk_size, fail_fast=fail_fast)

def make_algorithm(spec: AlgorithmSpec) -> ConversionAlgorithm:
    return _make_algorithm(spec)

def register_algorithm(name: str, algorithm: ConversionAlgorithm, *, overwrite: bool = False) -> None:
    _reg().register(name, algorithm, overwrite=overwrite)

# ============================================================
# Calendar helpers
# ============================================================

def is_leap_year(year: int) -> bool:
    return bool(fast.is_leap_year(year, fast.divisibility_for(year, year)))

def last_day_of_month(year: int, month: int) -> int:
    if not (1 <= month <= 12):
        raise ValueError("month must be in 1..12")
    return int(fast.last_day_of_month(year, month, fast.divisibility_for(year, year)))
