"""
metanature exception hierarchy.

Provides user-friendly exceptions with helpful error messages and suggestions.
All metanature-specific exceptions inherit from MetaNatureError for easy catching.

Example:
    try:
        solver = Solver.build(DEConfig().fixed(), func).solve()
    except MetaNatureError as e:
        print(f"Solve failed: {e}")
        print(f"Suggestion: {e.suggestion}")
"""

from __future__ import annotations

from typing import Any


class MetaNatureError(Exception):
    """
    Base exception for all metanature errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MetaNatureError):
    """Raised when solver or algorithm configuration is invalid or incomplete."""

    pass


class InvalidAlgorithmError(ConfigurationError):
    """Raised when an unknown algorithm is specified."""

    def __init__(self, algorithm: str, available: list[str] | None = None, hint: str | None = None) -> None:
        available = available or ["de", "fa", "pso", "rga", "tlbo"]
        message = f"Unknown algorithm '{algorithm}'."
        suggestion = f"Available algorithms: {', '.join(available)}"
        if hint:
            suggestion += f". {hint}"
        super().__init__(message, suggestion, {"algorithm": algorithm, "available": available})


class InvalidStrategyError(ConfigurationError):
    """Raised when an unknown differential evolution strategy is specified."""

    def __init__(self, strategy: Any, available: list[str] | None = None) -> None:
        available = available or [f"s{i}" for i in range(1, 11)]
        message = f"Unknown differential evolution strategy '{strategy}'."
        suggestion = f"Available strategies: {', '.join(available)}"
        super().__init__(message, suggestion, {"strategy": strategy})


class InvalidEngineError(ConfigurationError):
    """Raised when an unknown evaluation backend is specified."""

    def __init__(self, engine: str, available: list[str] | None = None) -> None:
        available = available or ["serial", "thread", "multiprocessing"]
        message = f"Unknown evaluation backend '{engine}'."
        suggestion = f"Available backends: {', '.join(available)}"
        super().__init__(message, suggestion, {"engine": engine, "available": available})


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, field: str, config_class: str | None = None) -> None:
        message = f"Missing required configuration: '{field}'."
        suggestion = f"Add '{field}' to your configuration"
        if config_class:
            suggestion += f" or use {config_class}.default() for sensible defaults"
        super().__init__(message, suggestion, {"field": field})


class PopulationSizeError(ConfigurationError):
    """Raised when the population is too small for the selected algorithm."""

    def __init__(self, pop_num: int, minimum: int = 1, algorithm: str | None = None) -> None:
        if algorithm:
            message = f"Population size {pop_num} is too small for {algorithm} (needs at least {minimum})."
        else:
            message = f"Population size {pop_num} is invalid (needs at least {minimum})."
        suggestion = f"Call pop_num() with a value >= {minimum}"
        super().__init__(message, suggestion, {"pop_num": pop_num, "minimum": minimum})


class SeedError(ConfigurationError):
    """Raised when a random seed cannot be used."""

    def __init__(self, seed: Any) -> None:
        message = f"Invalid random seed {seed!r}."
        suggestion = "Use None for OS entropy or an integer in [0, 2**128)"
        super().__init__(message, suggestion, {"seed": seed})


class PoolShapeError(ConfigurationError):
    """Raised when a caller-supplied pool does not match (pop_num, dim)."""

    def __init__(self, message: str, expected: tuple[int, ...] | None = None, got: tuple[int, ...] | None = None) -> None:
        suggestion = "Supply one row of length dim per individual and one fitness value per row"
        super().__init__(message, suggestion, {"expected": expected, "got": got})


# =============================================================================
# Problem Errors
# =============================================================================


class ProblemError(MetaNatureError):
    """Base class for objective-related errors."""

    pass


class ProblemDimensionError(ProblemError):
    """Raised when the objective dimension is invalid."""

    def __init__(self, message: str, dim: int | None = None) -> None:
        suggestion = "Return one [lower, upper] pair per variable from bound"
        super().__init__(message, suggestion, {"dim": dim})


class BoundsError(ProblemError):
    """Raised when bounds are invalid or inconsistent."""

    def __init__(self, message: str) -> None:
        suggestion = "Ensure lower <= upper for all variables and every bound is a [lower, upper] pair"
        super().__init__(message, suggestion)


# =============================================================================
# Runtime Errors
# =============================================================================


class EmptyBestError(MetaNatureError, LookupError):
    """Raised when a result is requested from an empty best container."""

    def __init__(self) -> None:
        super().__init__(
            "No best element available.",
            "Update the container with at least one valid candidate first",
        )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Base
    "MetaNatureError",
    # Configuration
    "ConfigurationError",
    "InvalidAlgorithmError",
    "InvalidStrategyError",
    "InvalidEngineError",
    "MissingConfigError",
    "PopulationSizeError",
    "SeedError",
    "PoolShapeError",
    # Problem
    "ProblemError",
    "ProblemDimensionError",
    "BoundsError",
    # Runtime
    "EmptyBestError",
]
