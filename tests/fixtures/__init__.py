"""
Centralized test fixtures for the evolver optimizer.

This module provides reusable helpers for:
- Deterministic stub candidates (fixed, scripted and NaN scores)
- Scripted random sources for reproducing exact selection draws
"""

from .candidates import (
    FixedCandidate,
    ScriptedCandidate,
    ScriptedRng,
    make_records,
)

__all__ = [
    "FixedCandidate",
    "ScriptedCandidate",
    "ScriptedRng",
    "make_records",
]
