"""
Evolutionary optimization of arbitrary candidates.

Callers implement the Candidate contract (breed, mutate, evaluate); the
Optimizer manages the population, scoring and survival.
"""

__version__ = "0.3.0"

from .candidate import Candidate
from .config import OptimizerConfig, SelectionStrategy
from .exceptions import EmptyPopulationError, EvolverError, InvalidConfigError
from .optimizer import Optimizer
from .population import PopulationRecord, sort_population

__all__ = [
    # Contract
    "Candidate",
    # Engine
    "Optimizer",
    "OptimizerConfig",
    "SelectionStrategy",
    "PopulationRecord",
    "sort_population",
    # Errors
    "EvolverError",
    "InvalidConfigError",
    "EmptyPopulationError",
]
