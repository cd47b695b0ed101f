"""
Evolutionary Optimizer
======================

Maximizes the score of arbitrary items implementing the Candidate contract.
Each generation runs, in order:

    1. populate  - breed random pairs up to the population size, mutate some children
    2. evaluate  - refresh (or average) every score
    3. sort      - best first, NaN last
    4. survive   - cut down to survive + bad_survive with the configured strategy
    5. sort      - index 0 is the best item again

The optimizer is single threaded. Randomness comes from an injectable
``rng`` so runs can be reproduced.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import random
from typing import Any, Dict, Generic, List, Optional, Tuple

import pandas as pd

from evolver.candidate import C
from evolver.config import OptimizerConfig, SelectionStrategy
from evolver.exceptions import EmptyPopulationError
from evolver.population import PopulationRecord, population_stats, sort_population
from evolver.selection import select_survivors

logger = logging.getLogger(__name__)


class Optimizer(Generic[C]):
    """
    Evolutionary optimizer maximizing a score over a population of candidates.

    Configure with the chainable ``set_*`` methods, seed with ``add_item``
    and call ``optimize``::

        opt = Optimizer(random_seed=7)
        opt.set_population(100).set_survive(8).set_bad_survive(2)
        opt.add_item(seed)
        best_score = opt.optimize(50)
    """

    def __init__(
        self,
        config: Optional[OptimizerConfig] = None,
        rng: Any = None,
        random_seed: Optional[int] = None,
    ):
        """
        Initialize the optimizer with an empty population.

        Args:
            config: Starting configuration, copied (defaults to OptimizerConfig())
            rng: Random source exposing random() and randrange(); wins over random_seed
            random_seed: Seed for a private random.Random when no rng is given
        """
        # own copy; the caller's object can still be edited without validation
        self.config = copy.copy(config) if config is not None else OptimizerConfig()
        self.rng = rng if rng is not None else random.Random(random_seed)
        self.generation = 0
        self._items: List[PopulationRecord[C]] = []
        self._history: Dict[str, List[float]] = {'best': [], 'avg': [], 'worst': []}

        logger.info(
            f"Optimizer initialized with population={self.config.population}, "
            f"survive={self.config.survive}, bad_survive={self.config.bad_survive}, "
            f"strategy={self.config.selection_strategy.value}"
        )

    @classmethod
    def from_settings(cls, settings: Any, rng: Any = None) -> "Optimizer":
        """Build an optimizer from a validated OptimizerSettings object."""
        return cls(config=settings.to_config(), rng=rng, random_seed=settings.random_seed)

    # ------------------------------------------------------------------
    # Configuration (chainable)
    # ------------------------------------------------------------------

    def set_population(self, population: int) -> "Optimizer[C]":
        """Set population size (number of items to live after breeding)."""
        self.config.set_population(population)
        return self

    def set_survive(self, survive: int) -> "Optimizer[C]":
        """Set number of best items to survive."""
        self.config.set_survive(survive)
        return self

    def set_bad_survive(self, bad_survive: int) -> "Optimizer[C]":
        """Set number of bad items to survive."""
        self.config.set_bad_survive(bad_survive)
        return self

    def set_prob_mutate(self, prob_mutate: float) -> "Optimizer[C]":
        """Set probability of mutation."""
        self.config.set_prob_mutate(prob_mutate)
        return self

    def set_selection_strategy(self, strategy: SelectionStrategy | str) -> "Optimizer[C]":
        """
        Set selection strategy.

        DETERMINISTIC: best ``survive`` items and randomly chosen ``bad_survive`` items survive.
        STOCHASTIC: ``survive + bad_survive`` items are drawn, survival chance falls off cubically with rank.
        """
        self.config.set_selection_strategy(strategy)
        return self

    def set_smoothing_window(self, window: int) -> "Optimizer[C]":
        """Set number of rounds to average the score over (0 = fresh score every round)."""
        self.config.set_smoothing_window(window)
        return self

    def set_mean_avg(self, rounds: int) -> "Optimizer[C]":
        """Set number of evaluation rounds to build the mean average over (1 = no averaging)."""
        self.config.set_mean_avg(rounds)
        return self

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def _require_items(self, operation: str) -> None:
        if not self._items:
            raise EmptyPopulationError(operation)

    def get_best(self) -> C:
        """Return a copy of the best item."""
        self._require_items("get_best")
        return copy.deepcopy(self._items[0].candidate)

    def get_best_ref(self) -> C:
        """Return the best item itself (not a copy)."""
        self._require_items("get_best_ref")
        return self._items[0].candidate

    def get_score(self) -> float:
        """Return the best item's score."""
        self._require_items("get_score")
        return self._items[0].score

    def get_worst_score(self) -> float:
        """Return the worst item's score."""
        self._require_items("get_worst_score")
        return self._items[-1].score

    def get_items(self) -> Tuple[PopulationRecord[C], ...]:
        """Return a snapshot of the whole population, best first after optimize."""
        return tuple(dataclasses.replace(r) for r in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get_stats(self) -> Dict[str, float]:
        """Get population statistics over non-NaN scores."""
        return population_stats(self._items)

    def get_convergence_history(self) -> Dict[str, List[float]]:
        """Get best/avg/worst score after each generation."""
        return {k: list(v) for k, v in self._history.items()}

    def history_frame(self) -> pd.DataFrame:
        """Convergence history as a DataFrame indexed by generation."""
        df = pd.DataFrame(self._history, columns=['best', 'avg', 'worst'])
        df.index = pd.RangeIndex(start=1, stop=len(df) + 1, name='generation')
        return df

    # ------------------------------------------------------------------
    # Population management
    # ------------------------------------------------------------------

    def add_item(self, item: C) -> "Optimizer[C]":
        """Evaluate ``item`` once and add it to the population (no sort, no cull)."""
        score = item.evaluate()
        # The seed evaluation counts as one round when scores are averaged
        age = min(1, self.config.smoothing_window)
        self._items.append(PopulationRecord(item, score, age))
        return self

    def optimize(self, n: int) -> float:
        """
        Run ``n`` generations of breed/mutate, evaluate, sort, survive, sort.

        Returns:
            Best score after the last generation

        Raises:
            EmptyPopulationError: If no item was added yet
        """
        self._require_items("optimize")

        logger.info(f"Starting optimization for {n} generations from {len(self._items)} items")
        for _ in range(n):
            self._populate()
            self._evaluate()
            self._sort()
            self._survive()
            self._sort()
            self._record_generation()

        logger.info(f"Optimization step complete. Best score: {self.get_score():.6g}")
        return self.get_score()

    def _populate(self) -> None:
        """Fill the population with children of random pairs, mutating some."""
        length = len(self._items)
        missing = self.config.population - length
        for _ in range(missing):
            # self-breeding is allowed
            i1 = self.rng.randrange(length)
            i2 = self.rng.randrange(length)
            child = self._items[i1].candidate.breed(self._items[i2].candidate)

            if self.rng.random() < self.config.prob_mutate:
                child.mutate()

            # scored in the evaluate step
            self._items.append(PopulationRecord(child, 0.0, 0))

    def _evaluate(self) -> None:
        """Refresh every score, averaging over the last rounds when smoothing."""
        window = self.config.smoothing_window
        for record in self._items:
            fresh = record.candidate.evaluate()
            if record.age == 0:
                # nothing to average with; also keeps a stale NaN/inf from leaking in
                record.score = fresh
            else:
                record.score = (record.score * record.age + fresh) / (record.age + 1)
            record.age = min(record.age + 1, window)

    def _sort(self) -> None:
        sort_population(self._items)

    def _survive(self) -> None:
        self._items = select_survivors(self._items, self.config, self.rng)

    def _record_generation(self) -> None:
        self.generation += 1
        stats = self.get_stats()
        self._history['best'].append(stats['best'])
        self._history['avg'].append(stats['avg'])
        self._history['worst'].append(stats['worst'])
        logger.debug(
            f"Gen {self.generation}: best={stats['best']:.4f}, "
            f"avg={stats['avg']:.4f}, worst={stats['worst']:.4f}"
        )
