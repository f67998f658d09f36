from __future__ import annotations
from ratadie.core.engine import AlgorithmRegistry
from ratadie.engines.specs import ALL_SPECS
from ratadie.engines.factory import make_algorithm

def build_registry() -> AlgorithmRegistry:
    algorithms = {}
    for name, spec in ALL_SPECS.items():
        algorithms[name] = make_algorithm(spec)
    return AlgorithmRegistry(algorithms)
