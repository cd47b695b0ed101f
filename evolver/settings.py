"""
Typed Settings (YAML + Pydantic)
================================

Loads optimizer settings from YAML and validates them.

Resolution order for the settings file:
    1. explicit path argument
    2. EVOLVER_CONFIG_PATH environment variable
    3. defaults.yaml shipped next to this module

Usage:
    from evolver.settings import load_validated_settings, get_setting

    settings = load_validated_settings("my_run.yaml")
    opt = Optimizer.from_settings(settings.optimizer)

    generations = get_setting("run.generations", 100)
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from evolver.config import OptimizerConfig, SelectionStrategy
from evolver.exceptions import InvalidConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EVOLVER_CONFIG_PATH"

_settings_cache: Dict[Path, Dict[str, Any]] = {}


# ============================================================================
# Schema Definitions
# ============================================================================

class OptimizerSettings(BaseModel):
    """Optimizer section of a settings file."""
    model_config = ConfigDict(extra="forbid")

    population: int = Field(default=200, ge=3, description="Items alive after breeding")
    survive: int = Field(default=7, ge=1, description="Best items kept each generation")
    bad_survive: int = Field(default=3, ge=1, description="Random non-top items kept")
    prob_mutate: float = Field(default=0.9, ge=0.0, le=1.0, description="Mutation probability")
    selection_strategy: SelectionStrategy = SelectionStrategy.DETERMINISTIC
    smoothing_window: int = Field(default=0, ge=0, description="Rounds to average over")
    random_seed: Optional[int] = None

    @model_validator(mode="after")
    def _population_fits_survivors(self) -> "OptimizerSettings":
        if self.population <= self.survive + self.bad_survive:
            raise ValueError(
                f"population ({self.population}) must be greater than "
                f"survive + bad_survive ({self.survive + self.bad_survive})"
            )
        return self

    def to_config(self) -> OptimizerConfig:
        return OptimizerConfig(
            population=self.population,
            survive=self.survive,
            bad_survive=self.bad_survive,
            prob_mutate=self.prob_mutate,
            selection_strategy=self.selection_strategy,
            smoothing_window=self.smoothing_window,
        )


class RunSettings(BaseModel):
    """How long the CLI driver runs."""
    rounds: int = Field(default=10, ge=1)
    generations: int = Field(default=100, ge=1, description="Generations per round")


class Settings(BaseModel):
    """Complete settings schema."""
    model_config = ConfigDict(extra="allow")

    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    run: RunSettings = Field(default_factory=RunSettings)


# ============================================================================
# Loading
# ============================================================================

def get_config_path(path: str | Path | None = None) -> Path:
    """Return the settings file to use."""
    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path(__file__).parent / "defaults.yaml"


def load_settings(path: str | Path | None = None, force_reload: bool = False) -> Dict[str, Any]:
    """Load and cache the raw settings mapping."""
    config_path = get_config_path(path)
    if config_path in _settings_cache and not force_reload:
        return _settings_cache[config_path]

    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}")
        _settings_cache[config_path] = {}
        return _settings_cache[config_path]

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidConfigError(
            "Settings file must contain a mapping at the top level",
            context={"path": str(config_path)},
        )
    _settings_cache[config_path] = data
    return data


def get_setting(key: str, default: Any = None, path: str | Path | None = None) -> Any:
    """
    Get a nested setting by dot-notation path.
    Example: get_setting("optimizer.population", 200)
    """
    value: Any = load_settings(path)
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value


def validate_settings(raw: Dict[str, Any]) -> Settings:
    """
    Validate a raw settings mapping.

    Raises:
        InvalidConfigError: If the mapping does not match the schema
    """
    try:
        return Settings(**raw)
    except ValidationError as e:
        logger.error(f"Settings validation failed: {e}")
        raise InvalidConfigError(
            "Settings validation failed",
            context={"errors": [err["msg"] for err in e.errors()]},
            cause=e,
        ) from e


def load_validated_settings(path: str | Path | None = None, force_reload: bool = False) -> Settings:
    """Load settings from YAML and validate them."""
    return validate_settings(load_settings(path, force_reload=force_reload))
