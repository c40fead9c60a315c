"""
Algorithm registry.

Maps strategy names to configuration builders so that a strategy can be
selected at runtime (``Solver.build_boxed("de", func)``) instead of by class.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from metanature.foundation.exceptions import InvalidAlgorithmError
from metanature.foundation.registry import Registry

from .config import AlgorithmConfig, DEConfig, FAConfig, PSOConfig, RGAConfig, TLBOConfig
from .config.base import _require_fields


class ConfigBuilder(Protocol):
    def fixed(self) -> AlgorithmConfig: ...


_ALGORITHMS: Registry[type] | None = None


def _register_algorithms(registry: Registry[type]) -> None:
    registry.register("de", DEConfig)
    registry.register("fa", FAConfig)
    registry.register("pso", PSOConfig)
    registry.register("rga", RGAConfig)
    registry.register("tlbo", TLBOConfig)


def get_algorithms_registry() -> Registry[type]:
    global _ALGORITHMS
    if _ALGORITHMS is None:
        registry: Registry[type] = Registry("Algorithms")
        _register_algorithms(registry)
        _ALGORITHMS = registry
    return _ALGORITHMS


def _unknown(name: str) -> InvalidAlgorithmError:
    registry = get_algorithms_registry()
    suggestions = registry.suggest(name)
    hint = None
    if len(suggestions) == 1:
        hint = f"Did you mean '{suggestions[0]}'?"
    elif suggestions:
        hint = "Did you mean one of: " + ", ".join(f"'{item}'" for item in suggestions) + "?"
    return InvalidAlgorithmError(name, registry.list(), hint)


def resolve_algorithm(name: str) -> type:
    """Configuration builder class registered under ``name``."""
    registry = get_algorithms_registry()
    try:
        return registry[name]
    except KeyError as exc:
        raise _unknown(name) from exc


def config_from_mapping(config: Mapping[str, Any]) -> AlgorithmConfig:
    """Build a frozen configuration from ``{"algorithm": name, **settings}``."""
    cfg = dict(config)
    _require_fields(cfg, ("algorithm",), "Algorithm mapping")
    builder = resolve_algorithm(str(cfg.pop("algorithm")))
    return builder.from_dict(cfg)


def resolve_config(spec: str | Mapping[str, Any] | AlgorithmConfig | ConfigBuilder) -> AlgorithmConfig:
    """Normalize a name, mapping, builder or frozen config into a frozen config."""
    if isinstance(spec, AlgorithmConfig):
        return spec
    if isinstance(spec, str):
        return resolve_algorithm(spec).default()
    if isinstance(spec, Mapping):
        return config_from_mapping(spec)
    fixed = getattr(spec, "fixed", None)
    if callable(fixed):
        return fixed()
    raise InvalidAlgorithmError(repr(spec), get_algorithms_registry().list())


def available_algorithms() -> list[str]:
    return get_algorithms_registry().list()


def __getattr__(name: str) -> Any:
    if name == "ALGORITHMS":
        return get_algorithms_registry()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "available_algorithms",
    "config_from_mapping",
    "get_algorithms_registry",
    "resolve_algorithm",
    "resolve_config",
]
