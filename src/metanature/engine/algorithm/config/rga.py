"""Real-coded GA configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict

from metanature.engine.algorithm.rga import RGA
from .base import AlgorithmConfig, _check_keys, _non_negative, _probability

_KEYS = ("cross", "mutate", "win", "delta")


@dataclass(frozen=True)
class RGAConfigData(AlgorithmConfig):
    name: ClassVar[str] = "rga"
    pop_default: ClassVar[int] = 500

    cross: float = 0.95
    mutate: float = 0.05
    win: float = 0.95
    delta: float = 5.0

    def algorithm(self) -> RGA:
        return RGA(cross=self.cross, mutate=self.mutate, win=self.win, delta=self.delta)


class RGAConfig:
    """
    Declarative configuration holder for the real-coded genetic algorithm.

    Examples:
        cfg = RGAConfig().cross(0.9).mutate(0.1).fixed()
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls) -> RGAConfigData:
        return cls().fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> RGAConfigData:
        _check_keys(config, _KEYS, "RGA")
        builder = cls()
        for key in _KEYS:
            if key in config:
                getattr(builder, key)(config[key])
        return builder.fixed()

    def cross(self, value: float) -> "RGAConfig":
        self._cfg["cross"] = value
        return self

    def mutate(self, value: float) -> "RGAConfig":
        self._cfg["mutate"] = value
        return self

    def win(self, value: float) -> "RGAConfig":
        self._cfg["win"] = value
        return self

    def delta(self, value: float) -> "RGAConfig":
        self._cfg["delta"] = value
        return self

    def fixed(self) -> RGAConfigData:
        return RGAConfigData(
            cross=_probability(self._cfg.get("cross", 0.95), "cross", "RGA"),
            mutate=_probability(self._cfg.get("mutate", 0.05), "mutate", "RGA"),
            win=_probability(self._cfg.get("win", 0.95), "win", "RGA"),
            delta=_non_negative(self._cfg.get("delta", 5.0), "delta", "RGA"),
        )
