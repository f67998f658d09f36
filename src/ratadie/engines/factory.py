"""
ratadie.engines.factory
-----------------------
Transforms pure data specifications into live algorithm objects.
"""

from __future__ import annotations

from ..core.engine import ConversionAlgorithm
from ..core.types import AlgorithmSpec, INT16, INT32, UNIX_EPOCH
from .baum import Baum
from .glibc import Glibc
from .gregorian import Gregorian


def make_algorithm(spec: AlgorithmSpec) -> ConversionAlgorithm:
    """The universal entry point."""
    if spec.kind == "gregorian":
        return Gregorian(spec.year_type, spec.rata_die_type, spec.epoch, id=spec.id)

    # The references are written for one configuration only.
    if (spec.year_type, spec.rata_die_type, spec.epoch) != (INT16, INT32, UNIX_EPOCH):
        raise ValueError(f"'{spec.kind}' only supports int16 years, int32 day counts and the unix epoch")
    if spec.kind == "baum":
        return Baum(id=spec.id)
    if spec.kind == "glibc":
        return Glibc(id=spec.id)
    raise TypeError(f"Unknown algorithm kind: {spec.kind!r}")
