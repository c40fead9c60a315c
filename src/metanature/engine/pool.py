"""
Initial population policies.

A policy produces the ``(pop_num, dim)`` starting pool of a solve.
``ReadyPool`` also carries the fitness values, so the pool is installed without
being evaluated.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from metanature.foundation.exceptions import ConfigurationError, PoolShapeError
from metanature.foundation.random import Rng


class PoolPolicy(ABC):
    """Base class of initial population policies."""

    name: str = "pool"

    def validate(self, pop_num: int, dim: int) -> None:
        """Raise a configuration error when the policy cannot produce ``(pop_num, dim)``."""
        return None

    @abstractmethod
    def generate(self, bounds: np.ndarray, pop_num: int, rng: Rng) -> np.ndarray:
        """Return a ``(pop_num, dim)`` array of in-bounds design vectors."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FuncPool(PoolPolicy):
    """Coordinate-wise generator: ``f(s, (lower, upper), rng) -> value``."""

    name = "func"

    def __init__(self, f: Callable[[int, tuple[float, float], Rng], float]) -> None:
        self.f = f

    def generate(self, bounds: np.ndarray, pop_num: int, rng: Rng) -> np.ndarray:
        dim = bounds.shape[0]
        pool = np.empty((pop_num, dim), dtype=float)
        for i in range(pop_num):
            for s in range(dim):
                lo, hi = bounds[s]
                pool[i, s] = self.f(s, (float(lo), float(hi)), rng)
        return np.clip(pool, bounds[:, 0], bounds[:, 1])


class UniformPool(PoolPolicy):
    """Uniform sampling inside the bounds (the default)."""

    name = "uniform"

    def generate(self, bounds: np.ndarray, pop_num: int, rng: Rng) -> np.ndarray:
        return np.asarray(rng.range(bounds[:, 0], bounds[:, 1], (pop_num, bounds.shape[0])), dtype=float)


class UniformBy(PoolPolicy):
    """Uniform sampling that keeps only vectors accepted by ``filter``.

    ``max_attempts`` caps the number of draws per individual.
    """

    name = "uniform_by"

    def __init__(self, filter: Callable[[np.ndarray], bool], max_attempts: int = 10_000) -> None:
        self.filter = filter
        self.max_attempts = int(max_attempts)

    def generate(self, bounds: np.ndarray, pop_num: int, rng: Rng) -> np.ndarray:
        dim = bounds.shape[0]
        pool = np.empty((pop_num, dim), dtype=float)
        for i in range(pop_num):
            for _ in range(self.max_attempts):
                xs = np.asarray(rng.range(bounds[:, 0], bounds[:, 1], dim), dtype=float)
                if self.filter(xs):
                    pool[i] = xs
                    break
            else:
                raise ConfigurationError(
                    f"UniformBy filter rejected {self.max_attempts} consecutive samples.",
                    suggestion="Loosen the filter or raise max_attempts",
                )
        return pool


class GaussianPool(PoolPolicy):
    """Normal sampling with per-variable ``mean`` and ``std``, clipped into the bounds."""

    name = "gaussian"

    def __init__(self, mean: Sequence[float], std: Sequence[float]) -> None:
        self.mean = np.asarray(mean, dtype=float)
        self.std = np.asarray(std, dtype=float)

    def validate(self, pop_num: int, dim: int) -> None:
        if self.mean.shape != (dim,) or self.std.shape != (dim,):
            raise PoolShapeError(
                f"Gaussian pool needs mean and std of length {dim}, got {self.mean.shape} and {self.std.shape}.",
                expected=(dim,),
                got=self.mean.shape if self.mean.shape != (dim,) else self.std.shape,
            )
        if np.any(self.std < 0):
            raise ConfigurationError("Gaussian pool std must be non-negative.")

    def generate(self, bounds: np.ndarray, pop_num: int, rng: Rng) -> np.ndarray:
        pool = np.asarray(rng.gaussian(self.mean, self.std, (pop_num, bounds.shape[0])), dtype=float)
        return np.clip(pool, bounds[:, 0], bounds[:, 1])

    def __repr__(self) -> str:
        return f"GaussianPool(mean={self.mean.tolist()}, std={self.std.tolist()})"


class LatinHypercubePool(PoolPolicy):
    """
    Latin Hypercube Sampling: each variable's range is cut into ``pop_num``
    strata and every stratum holds exactly one individual.
    """

    name = "lhs"

    def generate(self, bounds: np.ndarray, pop_num: int, rng: Rng) -> np.ndarray:
        n = pop_num
        d = bounds.shape[0]
        samples = np.empty((n, d), dtype=float)
        for j in range(d):
            strata = (np.arange(n, dtype=float) + rng.rand(n)) / n
            rng.shuffle(strata)
            samples[:, j] = strata
        span = bounds[:, 1] - bounds[:, 0]
        return bounds[:, 0] + samples * span


class ReadyPool(PoolPolicy):
    """A caller-supplied pool with its fitness values.

    With ``sorted=True`` the caller guarantees that index 0 is the best
    individual; it is installed as best without rescanning the pool.
    """

    name = "ready"

    def __init__(self, pool: Any, pool_f: Sequence[Any], sorted: bool = False) -> None:
        self.pool = [np.asarray(xs, dtype=float) for xs in pool]
        self.pool_f = list(pool_f)
        self.sorted = bool(sorted)

    def __len__(self) -> int:
        return len(self.pool)

    def validate(self, pop_num: int, dim: int) -> None:
        if len(self.pool) != pop_num:
            raise PoolShapeError(
                f"Ready-made pool has {len(self.pool)} individuals, expected {pop_num}.",
                expected=(pop_num, dim),
                got=(len(self.pool),),
            )
        if len(self.pool_f) != len(self.pool):
            raise PoolShapeError(
                f"Ready-made pool has {len(self.pool)} individuals but {len(self.pool_f)} fitness values.",
                expected=(pop_num,),
                got=(len(self.pool_f),),
            )
        for i, xs in enumerate(self.pool):
            if xs.shape != (dim,):
                raise PoolShapeError(
                    f"Individual {i} of the ready-made pool has shape {xs.shape}, expected ({dim},).",
                    expected=(pop_num, dim),
                    got=(len(self.pool), *xs.shape),
                )

    def generate(self, bounds: np.ndarray, pop_num: int, rng: Rng) -> np.ndarray:
        return np.vstack(self.pool)

    def __repr__(self) -> str:
        return f"ReadyPool(n={len(self.pool)}, sorted={self.sorted})"


def uniform_pool() -> UniformPool:
    return UniformPool()


def gaussian_pool(mean: Sequence[float], std: Sequence[float]) -> GaussianPool:
    return GaussianPool(mean, std)


__all__ = [
    "FuncPool",
    "GaussianPool",
    "LatinHypercubePool",
    "PoolPolicy",
    "ReadyPool",
    "UniformBy",
    "UniformPool",
    "gaussian_pool",
    "uniform_pool",
]
