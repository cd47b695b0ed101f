"""
Population records, ordering and statistics.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Generic, List, Sequence, Tuple

import numpy as np

from evolver.candidate import C


@dataclass
class PopulationRecord(Generic[C]):
    """One item in the population with its (possibly averaged) score."""
    candidate: C
    score: float = 0.0
    age: int = 0  # evaluation rounds folded into score, capped at the smoothing window


def score_key(record: PopulationRecord) -> Tuple[bool, float]:
    """Sort key: best score first, NaN after everything else."""
    if math.isnan(record.score):
        return True, 0.0
    return False, -record.score


def sort_population(records: List[PopulationRecord]) -> List[PopulationRecord]:
    """Sort ``records`` in place, best first. NaN scores go last and compare equal."""
    records.sort(key=score_key)
    return records


def population_stats(records: Sequence[PopulationRecord]) -> Dict[str, float]:
    """Best/avg/worst/std over the non-NaN scores."""
    scores = np.array([r.score for r in records], dtype=float)
    scores = scores[~np.isnan(scores)]
    if scores.size == 0:
        nan = float("nan")
        return {'best': nan, 'avg': nan, 'worst': nan, 'std': nan, 'count': 0}
    return {
        'best': float(np.max(scores)),
        'avg': float(np.mean(scores)),
        'worst': float(np.min(scores)),
        'std': float(np.std(scores)),
        'count': int(scores.size),
    }
