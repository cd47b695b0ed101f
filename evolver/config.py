"""
Optimizer configuration with validated setters.

Every setter checks its own argument and raises InvalidConfigError without
touching the stored value when the argument is rejected. The one exception
to failing is the population size: raising survive or bad_survive past it
grows the population instead.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict

from evolver.exceptions import InvalidConfigError

logger = logging.getLogger(__name__)


class SelectionStrategy(Enum):
    """How survivors are picked after each generation."""
    DETERMINISTIC = "deterministic"  # best `survive` plus random `bad_survive`
    STOCHASTIC = "stochastic"        # cubic rank-biased draw


@dataclass
class OptimizerConfig:
    """
    Named configuration record for the optimizer.

    Attributes:
        population: Number of items after breeding each generation
        survive: Number of best items kept (weight-class size when stochastic)
        bad_survive: Number of extra non-top items kept for diversity
        prob_mutate: Probability that a freshly bred item is mutated
        selection_strategy: Survival strategy
        smoothing_window: Rounds to average the score over (0 = no averaging)

    Prefer the ``set_*`` methods over assigning fields directly; they enforce
    ``population > survive + bad_survive``.
    """
    population: int = 200
    survive: int = 7
    bad_survive: int = 3
    prob_mutate: float = 0.9
    selection_strategy: SelectionStrategy = SelectionStrategy.DETERMINISTIC
    smoothing_window: int = 0

    def __post_init__(self):
        # Route construction-time values through the same checks as the setters
        self._check_count("survive", self.survive)
        self._check_count("bad_survive", self.bad_survive)
        self._check_population(self.population)
        self.set_prob_mutate(self.prob_mutate)
        self.set_selection_strategy(self.selection_strategy)
        self.set_smoothing_window(self.smoothing_window)

    @property
    def survivor_count(self) -> int:
        """Number of items left after the survive step."""
        return self.survive + self.bad_survive

    @staticmethod
    def _check_count(name: str, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfigError(f"{name} must be an integer", context={name: value})
        if value < 1:
            raise InvalidConfigError(f"At least one item must be kept by {name}", context={name: value})

    def _check_population(self, population: Any) -> None:
        if isinstance(population, bool) or not isinstance(population, int):
            raise InvalidConfigError("population must be an integer", context={"population": population})
        if population <= self.survivor_count:
            raise InvalidConfigError(
                "The population must be big enough to contain all surviving items "
                "and at least one free space for generation of new ones",
                context={"population": population, "survivors": self.survivor_count},
            )

    def _heal_population(self) -> None:
        if self.population <= self.survivor_count:
            old = self.population
            self.population = self.survivor_count + 1
            logger.warning(
                f"Population was increased from {old} to {self.population} "
                f"to stay above survive + bad_survive"
            )

    def set_population(self, population: int) -> "OptimizerConfig":
        """Set the number of items to live after breeding."""
        self._check_population(population)
        self.population = population
        return self

    def set_survive(self, survive: int) -> "OptimizerConfig":
        """Set the number of best items to survive."""
        self._check_count("survive", survive)
        self.survive = survive
        self._heal_population()
        return self

    def set_bad_survive(self, bad_survive: int) -> "OptimizerConfig":
        """Set the number of bad items to survive."""
        self._check_count("bad_survive", bad_survive)
        self.bad_survive = bad_survive
        self._heal_population()
        return self

    def set_prob_mutate(self, prob_mutate: float) -> "OptimizerConfig":
        """Set the mutation probability, must be in [0.0, 1.0]."""
        if isinstance(prob_mutate, bool) or not isinstance(prob_mutate, (int, float)):
            raise InvalidConfigError("prob_mutate must be a number", context={"prob_mutate": prob_mutate})
        if math.isnan(prob_mutate) or prob_mutate < 0.0 or prob_mutate > 1.0:
            raise InvalidConfigError(
                "The given probability is not valid, must be in [0.0, 1.0]",
                context={"prob_mutate": prob_mutate},
            )
        self.prob_mutate = float(prob_mutate)
        return self

    def set_selection_strategy(self, strategy: SelectionStrategy | str) -> "OptimizerConfig":
        """Set the survival strategy by enum member or its value."""
        try:
            self.selection_strategy = SelectionStrategy(strategy)
        except ValueError as e:
            raise InvalidConfigError(
                f"Unknown selection strategy: {strategy!r}",
                context={"choices": [s.value for s in SelectionStrategy]},
                cause=e,
            ) from e
        return self

    def set_smoothing_window(self, window: int) -> "OptimizerConfig":
        """Set the number of rounds to average the score over (0 disables averaging)."""
        if isinstance(window, bool) or not isinstance(window, int):
            raise InvalidConfigError("smoothing_window must be an integer", context={"smoothing_window": window})
        if window < 0:
            raise InvalidConfigError("smoothing_window cannot be negative", context={"smoothing_window": window})
        self.smoothing_window = window
        return self

    def set_mean_avg(self, rounds: int) -> "OptimizerConfig":
        """
        Set the number of evaluation rounds to build the mean average over.

        ``1`` means no averaging. The window stores ``rounds - 1`` because the
        fresh evaluation always takes part in the average.
        """
        if isinstance(rounds, bool) or not isinstance(rounds, int):
            raise InvalidConfigError("rounds must be an integer", context={"rounds": rounds})
        if rounds < 1:
            raise InvalidConfigError("Mean average over 0 rounds is not possible", context={"rounds": rounds})
        self.smoothing_window = rounds - 1
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["selection_strategy"] = self.selection_strategy.value
        return data
