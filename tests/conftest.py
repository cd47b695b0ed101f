"""
Pytest configuration and shared fixtures for evolver tests.
"""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from evolver import Optimizer, OptimizerConfig  # noqa: E402
from evolver.settings import CONFIG_ENV_VAR, _settings_cache  # noqa: E402


@pytest.fixture
def rng():
    """Seeded stdlib random source."""
    return random.Random(42)


@pytest.fixture
def np_rng():
    """Seeded numpy generator."""
    return np.random.default_rng(42)


@pytest.fixture
def small_config():
    """Small configuration that keeps tests fast."""
    return OptimizerConfig(population=10, survive=2, bad_survive=1, prob_mutate=1.0)


@pytest.fixture
def optimizer(small_config):
    """Seeded optimizer with the small configuration and an empty population."""
    return Optimizer(config=small_config, random_seed=42)


@pytest.fixture
def quadratic_points():
    """Reference points lying exactly on y = x^2."""
    return [(0.0, 0.0), (1.0, 1.0), (2.0, 4.0), (3.0, 9.0), (4.0, 16.0)]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from the settings cache and EVOLVER_CONFIG_PATH."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    _settings_cache.clear()
    yield
    _settings_cache.clear()


@pytest.fixture
def settings_file(tmp_path):
    """Write a YAML settings file and return its path."""
    def _write(text: str, name: str = "settings.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
