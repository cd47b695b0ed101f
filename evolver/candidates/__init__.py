"""
Ready-made candidate types, mainly for demos and tests.
"""
from .scalar import ScalarTarget
from .polynomial import NoisyPolynomial, Polynomial, as_points

__all__ = [
    "ScalarTarget",
    "Polynomial",
    "NoisyPolynomial",
    "as_points",
]
