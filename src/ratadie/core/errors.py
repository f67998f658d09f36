from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..diagnostics.validator import Failure


class RataDieError(Exception):
    """Base error."""

class UnsupportedWidthError(RataDieError):
    """Raised when derived constants or vectorised sweeps cannot cover an integer width."""

class ValidationError(RataDieError):
    """Raised by ValidationReport.raise_for_failure() with the first divergence found."""

    def __init__(self, algorithm: str, failure: "Failure"):
        super().__init__(f"{algorithm}: {failure.message}")
        self.algorithm = algorithm
        self.failure = failure
