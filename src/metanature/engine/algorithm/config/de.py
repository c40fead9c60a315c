"""Differential Evolution configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict

from metanature.engine.algorithm.de import DE, Strategy
from .base import AlgorithmConfig, _check_keys, _positive, _probability


@dataclass(frozen=True)
class DEConfigData(AlgorithmConfig):
    name: ClassVar[str] = "de"
    pop_default: ClassVar[int] = 400

    strategy: str = "s1"
    f: float = 0.6
    cross: float = 0.9

    def algorithm(self) -> DE:
        return DE(strategy=self.strategy, f=self.f, cross=self.cross)


class DEConfig:
    """
    Declarative configuration holder for Differential Evolution.
    Provides a fluent builder that yields an immutable DEConfigData.

    Examples:
        cfg = DEConfig().strategy("s6").f(0.5).cross(0.8).fixed()
        cfg = DEConfig.default()
        cfg = DEConfig.from_dict({"strategy": "s2", "f": 0.7})
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls) -> DEConfigData:
        return cls().fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> DEConfigData:
        _check_keys(config, ("strategy", "f", "cross"), "DE")
        builder = cls()
        if "strategy" in config:
            builder.strategy(config["strategy"])
        if "f" in config:
            builder.f(config["f"])
        if "cross" in config:
            builder.cross(config["cross"])
        return builder.fixed()

    def strategy(self, value: Strategy | str | int) -> "DEConfig":
        self._cfg["strategy"] = Strategy.parse(value).value
        return self

    def f(self, value: float) -> "DEConfig":
        self._cfg["f"] = value
        return self

    def cross(self, value: float) -> "DEConfig":
        self._cfg["cross"] = value
        return self

    def fixed(self) -> DEConfigData:
        return DEConfigData(
            strategy=self._cfg.get("strategy", Strategy.S1.value),
            f=_positive(self._cfg.get("f", 0.6), "f", "DE"),
            cross=_probability(self._cfg.get("cross", 0.9), "cross", "DE"),
        )
