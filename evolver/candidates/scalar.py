"""
Single-number candidate pulled toward a target value.
"""

from __future__ import annotations

import random
from typing import Optional

from evolver.candidate import Candidate

INIT_RANGE = 1000.0   # fresh values are drawn from [0, INIT_RANGE)
MUTATE_RANGE = 100.0  # nudges are drawn from [-MUTATE_RANGE/2, MUTATE_RANGE/2)
PROB_RENEW = 0.05


class ScalarTarget(Candidate):
    """A float whose score is the negated squared distance to ``target``."""

    def __init__(
        self,
        value: Optional[float] = None,
        target: float = 125.0,
        rng: Optional[random.Random] = None,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.value = value if value is not None else self.rng.random() * INIT_RANGE
        self.target = target

    def __repr__(self) -> str:
        return f"ScalarTarget(value={self.value!r}, target={self.target!r})"

    def breed(self, other: "ScalarTarget") -> "ScalarTarget":
        # average half of the time, otherwise take one parent's value
        if self.rng.random() < 0.5:
            value = (self.value + other.value) / 2.0
        elif self.rng.random() < 0.5:
            value = self.value
        else:
            value = other.value
        return ScalarTarget(value, self.target, self.rng)

    def mutate(self) -> None:
        self.value += self.rng.random() * MUTATE_RANGE - MUTATE_RANGE / 2.0
        if self.rng.random() < PROB_RENEW:
            self.value = self.rng.random() * INIT_RANGE

    def evaluate(self) -> float:
        error = self.value - self.target
        return -error * error
