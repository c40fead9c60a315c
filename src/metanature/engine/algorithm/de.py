"""Differential Evolution.

Each trial vector is built from a donor (one of five difference formulas) and
a crossover scheme, then replaces its parent only when it is at least as good.

Reference:
    Storn, R. and Price, K. (1997). Differential Evolution - A Simple and
    Efficient Heuristic for Global Optimization over Continuous Spaces.
    Journal of Global Optimization 11, pp. 341-359.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from metanature.foundation.exceptions import InvalidStrategyError
from metanature.foundation.fitness import improves
from .base import Algorithm

if TYPE_CHECKING:
    from metanature.engine.context import Ctx
    from metanature.foundation.random import Rng


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


# Donor formulas: (pool, xs, best, v, f) -> donor vector.
# v holds the drawn indices; best is None for formulas that do not use it.
Formula = Callable[[np.ndarray, np.ndarray, Any, list[int], float], np.ndarray]


def _f1(pool, xs, best, v, f):
    return best + f * (pool[v[0]] - pool[v[1]])


def _f2(pool, xs, best, v, f):
    return pool[v[0]] + f * (pool[v[1]] - pool[v[2]])


def _f3(pool, xs, best, v, f):
    return xs + f * (best - xs + pool[v[0]] - pool[v[1]])


def _f4(pool, xs, best, v, f):
    return best + f * (pool[v[0]] + pool[v[1]] - pool[v[2]] - pool[v[3]])


def _f5(pool, xs, best, v, f):
    return pool[v[4]] + f * (pool[v[0]] + pool[v[1]] - pool[v[2]] - pool[v[3]])


# formula -> (function, number of random individuals, uses best)
_FORMULAS: dict[int, tuple[Formula, int, bool]] = {
    1: (_f1, 2, True),
    2: (_f2, 3, False),
    3: (_f3, 2, True),
    4: (_f4, 4, True),
    5: (_f5, 5, False),
}


def _c1(dim: int, cross: float, rng: "Rng") -> np.ndarray:
    """Continue-until-first-miss: copy donor coordinates cyclically from a random start."""
    mask = np.zeros(dim, dtype=bool)
    start = rng.ub(dim)
    for k in range(dim):
        if not rng.maybe(cross):
            break
        mask[(start + k) % dim] = True
    return mask


def _c2(dim: int, cross: float, rng: "Rng") -> np.ndarray:
    """Independent per coordinate; the last coordinate always comes from the donor."""
    mask = rng.rand(dim) < cross
    mask[-1] = True
    return mask


class Strategy(str, Enum):
    """DE strategy: S1..S5 are formulas f1..f5 with crossover c1, S6..S10 with c2."""

    S1 = "s1"
    S2 = "s2"
    S3 = "s3"
    S4 = "s4"
    S5 = "s5"
    S6 = "s6"
    S7 = "s7"
    S8 = "s8"
    S9 = "s9"
    S10 = "s10"

    @classmethod
    def parse(cls, value: "Strategy | str | int") -> "Strategy":
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidStrategyError(value)
        if isinstance(value, int):
            key = f"s{value}"
        elif isinstance(value, str):
            key = value.strip().lower()
        else:
            raise InvalidStrategyError(value)
        try:
            return cls(key)
        except ValueError as exc:
            raise InvalidStrategyError(value) from exc

    @property
    def number(self) -> int:
        return int(self.value[1:])

    @property
    def formula(self) -> int:
        return (self.number - 1) % 5 + 1

    @property
    def crossover(self) -> str:
        return "c1" if self.number <= 5 else "c2"


class DE(Algorithm):
    """Differential Evolution.

    Parameters
    ----------
    strategy : Strategy or str
        One of ``s1`` .. ``s10``.
    f : float
        Scale factor of the difference vectors.
    cross : float
        Crossover probability.

    Notes
    -----
    Generations are synchronous: donors come from the population as it was when
    the generation started and every trial is evaluated in one batch. Trials
    leaving the bounds are discarded.
    """

    name = "de"

    def __init__(self, strategy: Strategy | str = Strategy.S1, f: float = 0.6, cross: float = 0.9) -> None:
        self.strategy = Strategy.parse(strategy)
        self.f = float(f)
        self.cross = float(cross)
        self._formula, self._k, self._uses_best = _FORMULAS[self.strategy.formula]
        self._crossover = _c1 if self.strategy.crossover == "c1" else _c2
        self.min_pop_num = self._k + 1

    def generation(self, ctx: "Ctx", rng: "Rng") -> None:
        pop_num = ctx.pop_num()
        dim = ctx.dim()
        snapshot = ctx.pool.copy()
        slots: list[int] = []
        trials: list[np.ndarray] = []
        rejected = 0
        for i in range(pop_num):
            xs = snapshot[i]
            v = rng.fill_distinct([i] + [0] * self._k, 1, 0, pop_num)[1:]
            best = ctx.best.sample_xs(rng) if self._uses_best else None
            donor = self._formula(snapshot, xs, best, v, self.f)
            mask = self._crossover(dim, self.cross, rng)
            trial = np.where(mask, donor, xs)
            if not ctx.in_bounds(trial):
                rejected += 1
                continue
            if np.array_equal(trial, xs):
                continue
            slots.append(i)
            trials.append(trial)

        if trials:
            results = ctx.evaluate(np.vstack(trials))
            for i, trial, fit in zip(slots, trials, results):
                if improves(fit, ctx.pool_f[i]):
                    ctx.assign_from(i, trial, fit)
        _logger().debug("DE gen %d: %d trials evaluated, %d out of bounds", ctx.gen, len(trials), rejected)
        ctx.find_best()

    def __repr__(self) -> str:
        return f"DE(strategy={self.strategy.value}, f={self.f}, cross={self.cross})"


__all__ = ["DE", "Strategy"]
