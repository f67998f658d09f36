"""Diagnostics package.

- validator: boundary and round-trip validation of conversion algorithms
- sweep: numpy building blocks for the exhaustive sweeps
"""

from .validator import (
    CheckResult,
    Failure,
    ValidationReport,
    check_date_round_trip,
    check_epoch,
    check_round_bounds,
    check_round_trip,
    check_tightness,
    check_to_date_walk,
    check_to_rata_die_walk,
    validate,
)

__all__ = [
    "CheckResult",
    "Failure",
    "ValidationReport",
    "check_date_round_trip",
    "check_epoch",
    "check_round_bounds",
    "check_round_trip",
    "check_tightness",
    "check_to_date_walk",
    "check_to_rata_die_walk",
    "validate",
]
