"""
Exception Hierarchy for the evolver optimizer.

All exceptions inherit from EvolverError so callers can catch everything
raised by the engine in one place.

Usage:
    from evolver.exceptions import EvolverError, InvalidConfigError

    try:
        opt.set_prob_mutate(1.5)
    except InvalidConfigError as e:
        # Caller programming error, never retried
        log_error(e.to_dict())

Both concrete errors are non-recoverable: they signal a contract violation
by the caller, not a transient condition.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class EvolverError(Exception):
    """
    Base exception for all evolver errors.

    Attributes:
        error_code: Unique identifier for this error type
        is_recoverable: Whether the caller can sensibly continue
        context: Additional context about the error
        timestamp: When the error occurred
    """
    error_code: str = "EVOLVER_ERROR"
    is_recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "is_recoverable": self.is_recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class InvalidConfigError(EvolverError):
    """
    Raised when a configuration value is rejected.

    Examples:
    - population not larger than survive + bad_survive
    - survive or bad_survive below 1
    - mutation probability outside [0, 1] or NaN
    - averaging over zero rounds
    - a settings file that fails schema validation

    The stored configuration is left untouched when this is raised.
    """
    error_code = "INVALID_CONFIG"
    is_recoverable = False


# =============================================================================
# POPULATION ERRORS
# =============================================================================

class EmptyPopulationError(EvolverError):
    """
    Raised when an operation needs at least one item but the population is empty.

    Add a seed candidate with Optimizer.add_item() first.
    """
    error_code = "EMPTY_POPULATION"
    is_recoverable = False

    def __init__(
        self,
        operation: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation
        super().__init__(f"{operation} requires a non-empty population", context)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["operation"] = self.operation
        return data
