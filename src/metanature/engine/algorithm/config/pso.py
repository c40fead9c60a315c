"""PSO configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict

from metanature.engine.algorithm.pso import PSO
from .base import AlgorithmConfig, _check_keys, _non_negative

_KEYS = ("cognition", "social", "velocity")


@dataclass(frozen=True)
class PSOConfigData(AlgorithmConfig):
    name: ClassVar[str] = "pso"

    cognition: float = 2.05
    social: float = 2.05
    velocity: float = 1.3

    def algorithm(self) -> PSO:
        return PSO(cognition=self.cognition, social=self.social, velocity=self.velocity)


class PSOConfig:
    """Declarative configuration holder for particle swarm settings."""

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls) -> PSOConfigData:
        return cls().fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> PSOConfigData:
        _check_keys(config, _KEYS, "PSO")
        builder = cls()
        for key in _KEYS:
            if key in config:
                getattr(builder, key)(config[key])
        return builder.fixed()

    def cognition(self, value: float) -> "PSOConfig":
        self._cfg["cognition"] = value
        return self

    def social(self, value: float) -> "PSOConfig":
        self._cfg["social"] = value
        return self

    def velocity(self, value: float) -> "PSOConfig":
        self._cfg["velocity"] = value
        return self

    def fixed(self) -> PSOConfigData:
        return PSOConfigData(
            cognition=_non_negative(self._cfg.get("cognition", 2.05), "cognition", "PSO"),
            social=_non_negative(self._cfg.get("social", 2.05), "social", "PSO"),
            velocity=_non_negative(self._cfg.get("velocity", 1.3), "velocity", "PSO"),
        )
