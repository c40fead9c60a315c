"""Firefly configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict

from metanature.engine.algorithm.fa import FA
from .base import AlgorithmConfig, _check_keys, _non_negative

_KEYS = ("alpha", "beta_min", "gamma")


@dataclass(frozen=True)
class FAConfigData(AlgorithmConfig):
    name: ClassVar[str] = "fa"
    pop_default: ClassVar[int] = 80

    alpha: float = 1.0
    beta_min: float = 1.0
    gamma: float = 0.01

    def algorithm(self) -> FA:
        return FA(alpha=self.alpha, beta_min=self.beta_min, gamma=self.gamma)


class FAConfig:
    """Declarative configuration holder for the firefly algorithm."""

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls) -> FAConfigData:
        return cls().fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> FAConfigData:
        _check_keys(config, _KEYS, "FA")
        builder = cls()
        for key in _KEYS:
            if key in config:
                getattr(builder, key)(config[key])
        return builder.fixed()

    def alpha(self, value: float) -> "FAConfig":
        self._cfg["alpha"] = value
        return self

    def beta_min(self, value: float) -> "FAConfig":
        self._cfg["beta_min"] = value
        return self

    def gamma(self, value: float) -> "FAConfig":
        self._cfg["gamma"] = value
        return self

    def fixed(self) -> FAConfigData:
        return FAConfigData(
            alpha=_non_negative(self._cfg.get("alpha", 1.0), "alpha", "FA"),
            beta_min=_non_negative(self._cfg.get("beta_min", 1.0), "beta_min", "FA"),
            gamma=_non_negative(self._cfg.get("gamma", 0.01), "gamma", "FA"),
        )
