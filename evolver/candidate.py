"""
Capability contract for items the optimizer can evolve.

The optimizer never looks inside a candidate. It only breeds two of them,
mutates the child and asks it for a score.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TypeVar


class Candidate(ABC):
    """Base class for anything the optimizer can evolve."""

    @abstractmethod
    def breed(self, other: "Candidate") -> "Candidate":
        """
        Create a new candidate from this one and ``other``.

        Neither parent may be modified. Implementations usually mix per-trait
        values by picking one parent's value or averaging both.

        Returns:
            A new, valid instance of the same type
        """
        pass

    @abstractmethod
    def mutate(self) -> None:
        """
        Randomly perturb this candidate in place.

        Must terminate and must leave the candidate structurally valid.
        Occasional full reinitialisation on top of small nudges works well.
        """
        pass

    @abstractmethod
    def evaluate(self) -> float:
        """
        Score this candidate. Higher is better.

        May sample randomly (see smoothing). May return NaN for a candidate
        that cannot be scored; NaN always ranks last.
        """
        pass


C = TypeVar("C", bound=Candidate)
