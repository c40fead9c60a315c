"""
metanature: population-based meta-heuristics over box-bounded objectives.

Programmatic entrypoint::

    from metanature import DEConfig, Fx, Solver, max_gen

    func = Fx([[0.0, 50.0]] * 4, lambda x: x[0] ** 2 + 8 * x[1] ** 2 + x[2] ** 2 + x[3] ** 2)
    s = Solver.build(DEConfig().fixed(), func).pop_num(40).seed(0).task(max_gen(200)).solve()
    s.best_parameters(), s.best_fitness()

For lower-level control, import from the layered packages:
``metanature.foundation.*`` and ``metanature.engine.*``.
"""

from __future__ import annotations

from metanature.engine.algorithm import (
    DE,
    FA,
    PSO,
    RGA,
    TLBO,
    Algorithm,
    AlgorithmConfig,
    DEConfig,
    FAConfig,
    PSOConfig,
    RGAConfig,
    Strategy,
    TLBOConfig,
    available_algorithms,
)
from metanature.engine.context import Ctx
from metanature.engine.pool import FuncPool, GaussianPool, LatinHypercubePool, ReadyPool, UniformBy, UniformPool
from metanature.engine.solver import Solver, SolverBuilder
from metanature.engine.termination import any_of, max_gen, max_time, min_fit, slow_down
from metanature.foundation.exceptions import ConfigurationError, EmptyBestError, MetaNatureError, ProblemError
from metanature.foundation.fitness import Fitness, MultiObjective, Product
from metanature.foundation.logging import configure_metanature_logging
from metanature.foundation.pareto import Pareto, SingleBest
from metanature.foundation.problem import Fx, ObjFunc
from metanature.foundation.random import Rng
from metanature.foundation.version import get_version

__version__ = get_version()

__all__ = [
    # Solve
    "Solver",
    "SolverBuilder",
    "Ctx",
    # Strategies
    "Algorithm",
    "AlgorithmConfig",
    "DE",
    "DEConfig",
    "Strategy",
    "FA",
    "FAConfig",
    "PSO",
    "PSOConfig",
    "RGA",
    "RGAConfig",
    "TLBO",
    "TLBOConfig",
    "available_algorithms",
    # Pools
    "FuncPool",
    "GaussianPool",
    "LatinHypercubePool",
    "ReadyPool",
    "UniformBy",
    "UniformPool",
    # Termination
    "any_of",
    "max_gen",
    "max_time",
    "min_fit",
    "slow_down",
    # Objectives and fitness
    "Fitness",
    "Fx",
    "MultiObjective",
    "ObjFunc",
    "Pareto",
    "Product",
    "SingleBest",
    "Rng",
    # Errors and logging
    "ConfigurationError",
    "EmptyBestError",
    "MetaNatureError",
    "ProblemError",
    "configure_metanature_logging",
    "__version__",
]
