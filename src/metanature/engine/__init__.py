"""Solver loop, context, pool policies, termination presets and strategies."""

from .context import Ctx
from .pool import FuncPool, GaussianPool, LatinHypercubePool, PoolPolicy, ReadyPool, UniformBy, UniformPool
from .solver import Solver, SolverBuilder
from .termination import any_of, max_gen, max_time, min_fit, slow_down

__all__ = [
    "Ctx",
    "FuncPool",
    "GaussianPool",
    "LatinHypercubePool",
    "PoolPolicy",
    "ReadyPool",
    "Solver",
    "SolverBuilder",
    "UniformBy",
    "UniformPool",
    "any_of",
    "max_gen",
    "max_time",
    "min_fit",
    "slow_down",
]
