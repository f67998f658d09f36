"""ratadie public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    to_date,
    to_rata_die,
    list_algorithms,
    algorithm_info,
    get_algorithm,
    bounds,
    validate,
    make_algorithm,
    register_algorithm,
    is_leap_year,
    last_day_of_month,
)
from .core.errors import RataDieError, UnsupportedWidthError, ValidationError
from .core.types import (
    AlgorithmId,
    AlgorithmSpec,
    Bounds,
    COMPUTATIONAL_EPOCH,
    Date,
    INT16,
    INT32,
    INT64,
    IntType,
    UINT16,
    UINT32,
    UINT64,
    UNIX_EPOCH,
    parse_date,
)

__all__ = [
    "to_date",
    "to_rata_die",
    "list_algorithms",
    "algorithm_info",
    "get_algorithm",
    "bounds",
    "validate",
    "make_algorithm",
    "register_algorithm",
    "is_leap_year",
    "last_day_of_month",
    "RataDieError",
    "UnsupportedWidthError",
    "ValidationError",
    "AlgorithmId",
    "AlgorithmSpec",
    "Bounds",
    "COMPUTATIONAL_EPOCH",
    "Date",
    "INT16",
    "INT32",
    "INT64",
    "IntType",
    "UINT16",
    "UINT32",
    "UINT64",
    "UNIX_EPOCH",
    "parse_date",
]
