"""
ratadie.engines.interfaces
--------------------------
Shared plumbing for conversion algorithms.

Every algorithm is written once over "fields": to_date_fields(n) returns the
(year, month, day) components and to_rata_die_fields(y, m, d) the day count,
using only integer operators so that a numpy int64 array can stand in for a
scalar. The Date-level API and info() are derived from those two methods.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

import numpy as np

from ..core.types import AlgorithmId, Bounds, Date, IntType


class FieldAlgorithm:
    """Base class implementing the ConversionAlgorithm protocol on top of the two field methods."""

    id: AlgorithmId
    year_type: IntType
    rata_die_type: IntType
    epoch: Date
    bounds: Bounds

    # Directions that loop per value set these to False;
    # array inputs are then mapped value by value.
    vectorized_to_date: bool = True
    vectorized_to_rata_die: bool = True

    def to_date_fields(self, n) -> Tuple[Any, Any, Any]:
        raise NotImplementedError

    def to_rata_die_fields(self, y, m, d) -> Any:
        raise NotImplementedError

    # ---------------------------------------------------------
    # Scalar API
    # ---------------------------------------------------------

    def to_date(self, n: int) -> Date:
        y, m, d = self.to_date_fields(int(n))
        return Date(int(y), int(m), int(d))

    def to_rata_die(self, date: Date) -> int:
        return int(self.to_rata_die_fields(int(date.year), int(date.month), int(date.day)))

    # ---------------------------------------------------------
    # Array API (used by the validator sweeps)
    # ---------------------------------------------------------

    def _fits_int64_arithmetic(self) -> bool:
        # Intermediate products of 32-bit formulas stay below 2^63.
        return self.rata_die_type.bits <= 32

    def to_date_array(self, n: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        n = np.asarray(n, dtype=np.int64)
        if self.vectorized_to_date and self._fits_int64_arithmetic():
            return _as_int64(self.to_date_fields(n))
        return _map_scalar(self.to_date_fields, n)

    def to_rata_die_array(self, y: np.ndarray, m: np.ndarray, d: np.ndarray) -> np.ndarray:
        y = np.asarray(y, dtype=np.int64)
        m = np.asarray(m, dtype=np.int64)
        d = np.asarray(d, dtype=np.int64)
        if self.vectorized_to_rata_die and self._fits_int64_arithmetic():
            return np.asarray(self.to_rata_die_fields(y, m, d), dtype=np.int64)
        out = np.empty(y.shape, dtype=np.int64)
        for i in range(y.size):
            out[i] = self.to_rata_die_fields(int(y[i]), int(m[i]), int(d[i]))
        return out

    def info(self) -> Dict[str, Any]:
        return {
            "id": {"family": self.id.family, "name": self.id.name, "version": self.id.version},
            "year_type": self.year_type.name,
            "rata_die_type": self.rata_die_type.name,
            "epoch": str(self.epoch),
            "bounds": self.bounds.as_dict(),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id.name!r}, {self.year_type}, {self.rata_die_type}, epoch={self.epoch})"


def _as_int64(fields) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    y, m, d = fields
    return (np.asarray(y, dtype=np.int64), np.asarray(m, dtype=np.int64), np.asarray(d, dtype=np.int64))


def _map_scalar(fn: Callable[[int], Tuple[int, int, int]], n: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    y = np.empty(n.shape, dtype=np.int64)
    m = np.empty(n.shape, dtype=np.int64)
    d = np.empty(n.shape, dtype=np.int64)
    for i in range(n.size):
        y[i], m[i], d[i] = fn(int(n[i]))
    return y, m, d
