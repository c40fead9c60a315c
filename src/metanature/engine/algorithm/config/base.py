"""Base utilities for algorithm configuration."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict
from difflib import get_close_matches
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Tuple

from metanature.foundation.exceptions import ConfigurationError, MissingConfigError

if TYPE_CHECKING:
    from metanature.engine.algorithm.base import Algorithm


class _SerializableConfig:
    """Mixin to serialize dataclass configs."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


class AlgorithmConfig(_SerializableConfig, ABC):
    """Frozen settings of one strategy; builds a fresh :class:`Algorithm` per solve."""

    #: Registry name of the strategy.
    name: ClassVar[str] = ""
    #: Population size used when the solver is not given one.
    pop_default: ClassVar[int] = 200

    def default_pop_num(self) -> int:
        return self.pop_default

    @abstractmethod
    def algorithm(self) -> "Algorithm":
        """Create the strategy described by this configuration."""


def _require_fields(cfg: Dict[str, Any], fields: Tuple[str, ...], name: str) -> None:
    """Validate that required fields are present in configuration."""
    missing = [field for field in fields if field not in cfg]
    if missing:
        raise MissingConfigError(missing[0], name)


def _check_keys(cfg: Dict[str, Any], fields: Tuple[str, ...], name: str) -> None:
    """Reject settings the strategy does not know, with a close-match hint."""
    unknown = [key for key in cfg if key not in fields]
    if not unknown:
        return
    key = unknown[0]
    close = get_close_matches(str(key).lower(), fields, n=1, cutoff=0.6)
    suggestion = f"Known {name} settings: {', '.join(fields) or '(none)'}"
    if close:
        suggestion = f"Did you mean '{close[0]}'? {suggestion}"
    raise ConfigurationError(f"Unknown {name} setting '{key}'.", suggestion, {"unknown": unknown})


def _positive(value: Any, field: str, name: str) -> float:
    v = float(value)
    if not v > 0.0:
        raise ConfigurationError(f"{name} '{field}' must be positive, got {value!r}.")
    return v


def _non_negative(value: Any, field: str, name: str) -> float:
    v = float(value)
    if not v >= 0.0:
        raise ConfigurationError(f"{name} '{field}' must be non-negative, got {value!r}.")
    return v


def _probability(value: Any, field: str, name: str) -> float:
    v = float(value)
    if not 0.0 <= v <= 1.0:
        raise ConfigurationError(
            f"{name} '{field}' must be a probability in [0, 1], got {value!r}.",
            suggestion=f"Pass a value between 0 and 1 to {field}()",
        )
    return v


__all__ = ["AlgorithmConfig"]
