"""
Survival strategies.

Both functions expect ``records`` sorted best first and return the list of
survivors. Neither touches the input list.
"""

from __future__ import annotations

import logging
from typing import Any, List

from evolver.config import OptimizerConfig, SelectionStrategy
from evolver.population import PopulationRecord

logger = logging.getLogger(__name__)


def survive_deterministic(
    records: List[PopulationRecord],
    survive: int,
    bad_survive: int,
    rng: Any,
) -> List[PopulationRecord]:
    """
    Keep the best ``survive`` records plus ``bad_survive`` random others.

    The others are drawn uniformly without replacement from the tail. When
    the tail runs out first, fewer than ``survive + bad_survive`` survive.
    """
    kept = list(records[:survive])
    bad = list(records[survive:])
    for _ in range(bad_survive):
        if not bad:
            break
        i = rng.randrange(len(bad))
        # swap-remove: order of the tail does not matter
        bad[i], bad[-1] = bad[-1], bad[i]
        kept.append(bad.pop())
    return kept


def draw_ranks(size: int, rng: Any) -> List[int]:
    """
    Draw ``size`` distinct ranks in ``[0, size)`` biased toward rank 0.

    Each draw is ``floor(u**3 * size)`` with ``u`` uniform in [0, 1);
    duplicates are rejected and redrawn.
    """
    chosen: List[int] = []
    seen = set()
    while len(chosen) < size:
        index = int(rng.random() ** 3 * size)
        if index in seen:
            continue
        seen.add(index)
        chosen.append(index)
    return chosen


def survive_stochastic(
    records: List[PopulationRecord],
    survive: int,
    bad_survive: int,
    rng: Any,
) -> List[PopulationRecord]:
    """
    Keep ``survive + bad_survive`` records picked by cubic rank-biased draws.

    Ranks are sampled only from the first ``survive + bad_survive`` positions
    of the sorted population. Survivors keep their rank order.
    """
    size = survive + bad_survive
    ranks = sorted(draw_ranks(size, rng))
    return [records[i] for i in ranks]


def select_survivors(
    records: List[PopulationRecord],
    config: OptimizerConfig,
    rng: Any,
) -> List[PopulationRecord]:
    """Apply the configured strategy; no-op when already small enough."""
    if len(records) <= config.survivor_count:
        return records
    if config.selection_strategy is SelectionStrategy.DETERMINISTIC:
        survivors = survive_deterministic(records, config.survive, config.bad_survive, rng)
    else:
        survivors = survive_stochastic(records, config.survive, config.bad_survive, rng)
    logger.debug(
        f"{config.selection_strategy.value} survival kept {len(survivors)} of {len(records)}"
    )
    return survivors
