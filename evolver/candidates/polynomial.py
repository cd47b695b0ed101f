"""
Polynomial candidates fitted to reference points.

Coefficients are stored lowest power first: ``coeffs[i]`` multiplies ``x**i``.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from evolver.candidate import Candidate

PROB_DEGREE = 0.02    # chance to change the degree by one
PROB_DEG_INC = 0.75   # given a degree change, chance to increase
PROB_NEW = 0.05       # chance to re-randomise all coefficients
RANGE_NEW = 5.0       # fresh coefficients in [-2.5, 2.5)
PROB_MOD = 0.75       # per-coefficient chance to be nudged
RANGE_MOD = 1.0       # nudges in [-0.5, 0.5)
REGULARIZATION = 0.0001  # penalty per degree

Points = Tuple[np.ndarray, np.ndarray]


def as_points(points: Sequence[Tuple[float, float]]) -> Points:
    """Split ``[(x, y), ...]`` into read-only x and y arrays."""
    arr = np.asarray(points, dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2 or arr.shape[0] == 0:
        raise ValueError("points must be a non-empty sequence of (x, y) pairs")
    xs, ys = arr[:, 0].copy(), arr[:, 1].copy()
    xs.flags.writeable = False
    ys.flags.writeable = False
    return xs, ys


class Polynomial(Candidate):
    """
    Polynomial whose score is the negated mean squared error over all points
    plus a small penalty per degree.

    Starts as the constant zero function unless ``coeffs`` is given. The
    reference points are shared between all descendants, never copied.
    """

    def __init__(
        self,
        points: Points | Sequence[Tuple[float, float]],
        coeffs: Optional[Sequence[float]] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if isinstance(points, tuple) and len(points) == 2 and isinstance(points[0], np.ndarray):
            self.points = points
        else:
            self.points = as_points(points)
        self.coeffs = np.array(coeffs if coeffs is not None else [0.0], dtype=float)
        if self.coeffs.ndim != 1 or self.coeffs.size == 0:
            raise ValueError("coeffs must hold at least one value")
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def degree(self) -> int:
        return self.coeffs.size - 1

    def __call__(self, x):
        # np.polyval wants the highest power first
        return np.polyval(self.coeffs[::-1], x)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.format()})"

    def __deepcopy__(self, memo):
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone.coeffs = self.coeffs.copy()
        return clone

    def format(self) -> str:
        """Render as ``c0x^0 + c1x^1 + ...``."""
        return " + ".join(f"{c}x^{i}" for i, c in enumerate(self.coeffs))

    def _child(self, coeffs: np.ndarray) -> "Polynomial":
        return type(self)(self.points, coeffs, self.rng)

    def breed(self, other: "Polynomial") -> "Polynomial":
        coeffs = self.coeffs.copy()
        # positions beyond the shorter polynomial keep this parent's value
        n = min(coeffs.size, other.coeffs.size)
        rnd = self.rng.random(n)
        take_other = rnd < 0.333
        average = (rnd >= 0.333) & (rnd < 0.666)
        shared = coeffs[:n]
        shared[take_other] = other.coeffs[:n][take_other]
        shared[average] = (shared[average] + other.coeffs[:n][average]) / 2.0
        return self._child(coeffs)

    def mutate(self) -> None:
        if self.rng.random() < PROB_DEGREE:
            if self.coeffs.size <= 1 or self.rng.random() < PROB_DEG_INC:
                self.coeffs = np.append(self.coeffs, 0.0)
            else:
                self.coeffs = self.coeffs[:-1].copy()

        if self.rng.random() < PROB_NEW:
            self.coeffs = self.rng.random(self.coeffs.size) * RANGE_NEW - RANGE_NEW / 2.0

        modify = self.rng.random(self.coeffs.size) < PROB_MOD
        deltas = self.rng.random(self.coeffs.size) * RANGE_MOD - RANGE_MOD / 2.0
        self.coeffs = self.coeffs + np.where(modify, deltas, 0.0)

    def _error(self, xs: np.ndarray, ys: np.ndarray) -> float:
        residual = ys - self(xs)
        mse = float(np.mean(residual * residual))
        return -(mse + REGULARIZATION * self.degree)

    def evaluate(self) -> float:
        xs, ys = self.points
        return self._error(xs, ys)


class NoisyPolynomial(Polynomial):
    """
    Polynomial scored on a random mini-batch of points per evaluation.

    The score is noisy, so pair it with a smoothing window on the optimizer.
    """

    batch_size = 3

    def evaluate(self) -> float:
        xs, ys = self.points
        idx = self.rng.integers(0, xs.size, size=self.batch_size)
        return self._error(xs[idx], ys[idx])
