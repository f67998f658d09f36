from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Tuple

from .types import AlgorithmId, Bounds, Date, IntType

class ConversionAlgorithm(Protocol):
    """
    The contract every day-count <-> date algorithm satisfies, so that any of
    them can be handed to the validator or compared against another.
    """
    id: AlgorithmId
    year_type: IntType
    rata_die_type: IntType
    epoch: Date
    bounds: Bounds

    def info(self) -> Dict[str, Any]: ...
    def to_date(self, n: int) -> Date: ...
    def to_rata_die(self, d: Date) -> int: ...
    def to_date_fields(self, n) -> Tuple[Any, Any, Any]: ...
    def to_rata_die_fields(self, y, m, d) -> Any: ...

@dataclass
class AlgorithmRegistry:
    _algorithms: Dict[str, ConversionAlgorithm]

    def get(self, name: str) -> ConversionAlgorithm:
        if name not in self._algorithms:
            raise KeyError(f"Unknown algorithm '{name}'. Available: {sorted(self._algorithms)}")
        return self._algorithms[name]

    def list(self) -> List[str]:
        return sorted(self._algorithms.keys())

    def register(self, name: str, algorithm: ConversionAlgorithm, *, overwrite: bool = False) -> None:
        if (not overwrite) and (name in self._algorithms):
            raise KeyError(f"Algorithm '{name}' already exists. Use overwrite=True to replace.")
        self._algorithms[name] = algorithm
