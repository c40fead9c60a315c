"""TLBO configuration (the strategy has no tunable parameters)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict

from metanature.engine.algorithm.tlbo import TLBO
from .base import AlgorithmConfig, _check_keys


@dataclass(frozen=True)
class TLBOConfigData(AlgorithmConfig):
    name: ClassVar[str] = "tlbo"

    def algorithm(self) -> TLBO:
        return TLBO()


class TLBOConfig:
    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls) -> TLBOConfigData:
        return cls().fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> TLBOConfigData:
        _check_keys(config, (), "TLBO")
        return cls().fixed()

    def fixed(self) -> TLBOConfigData:
        return TLBOConfigData()
