"""Algorithm configuration module.

This package provides frozen configuration dataclasses and fluent builders for
every strategy.

Examples:
    from metanature.engine.algorithm.config import DEConfig, RGAConfig

    # Fluent builder
    cfg = DEConfig().strategy("s1").f(0.6).cross(0.9).fixed()

    # Quick defaults
    cfg = RGAConfig.default()
"""

from .base import AlgorithmConfig
from .de import DEConfig, DEConfigData
from .fa import FAConfig, FAConfigData
from .pso import PSOConfig, PSOConfigData
from .rga import RGAConfig, RGAConfigData
from .tlbo import TLBOConfig, TLBOConfigData

__all__ = [
    "AlgorithmConfig",
    # Differential Evolution
    "DEConfig",
    "DEConfigData",
    # Firefly
    "FAConfig",
    "FAConfigData",
    # Particle swarm
    "PSOConfig",
    "PSOConfigData",
    # Real-coded GA
    "RGAConfig",
    "RGAConfigData",
    # TLBO
    "TLBOConfig",
    "TLBOConfigData",
]
