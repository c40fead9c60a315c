from .base import Algorithm
from .de import DE, Strategy
from .fa import FA
from .pso import PSO
from .rga import RGA
from .tlbo import TLBO
from .config import (
    AlgorithmConfig,
    DEConfig,
    FAConfig,
    PSOConfig,
    RGAConfig,
    TLBOConfig,
)
from .registry import available_algorithms, resolve_algorithm, resolve_config

__all__ = [
    "Algorithm",
    "AlgorithmConfig",
    "DE",
    "DEConfig",
    "FA",
    "FAConfig",
    "PSO",
    "PSOConfig",
    "RGA",
    "RGAConfig",
    "Strategy",
    "TLBO",
    "TLBOConfig",
    "available_algorithms",
    "resolve_algorithm",
    "resolve_config",
]
