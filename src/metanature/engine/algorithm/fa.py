"""Firefly Algorithm.

Reference:
    Yang, X.-S. (2009). Firefly algorithms for multimodal optimization.
    Stochastic Algorithms: Foundations and Applications, pp. 169-178.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from metanature.foundation.fitness import improves, is_dominated
from .base import Algorithm

if TYPE_CHECKING:
    from metanature.engine.context import Ctx
    from metanature.foundation.random import Rng


class FA(Algorithm):
    """Firefly algorithm.

    Parameters
    ----------
    alpha : float
        Random step scale, relative to each bound width. Decays by 5% per generation.
    beta_min : float
        Attraction at distance zero.
    gamma : float
        Light absorption coefficient.
    """

    name = "fa"
    min_pop_num = 2

    def __init__(self, alpha: float = 1.0, beta_min: float = 1.0, gamma: float = 0.01) -> None:
        self.alpha = float(alpha)
        self._alpha = self.alpha
        self.beta_min = float(beta_min)
        self.gamma = float(gamma)

    def init(self, ctx: "Ctx", rng: "Rng") -> None:
        self._alpha = self.alpha

    def _move(self, pool: np.ndarray, pool_f: list, i: int, j: int, ctx: "Ctx", rng: "Rng") -> tuple[int, np.ndarray]:
        # The dimmer firefly of the pair moves towards the brighter one.
        a, b = (i, j) if is_dominated(pool_f[j], pool_f[i]) else (j, i)
        diff = pool[b] - pool[a]
        r = float(np.dot(diff, diff))
        beta = self.beta_min * math.exp(-self.gamma * r)
        width = ctx.upper - ctx.lower
        step = self._alpha * width * rng.range(-0.5, 0.5, ctx.dim())
        return a, ctx.clip(pool[a] + beta * diff + step)

    def generation(self, ctx: "Ctx", rng: "Rng") -> None:
        pop_num = ctx.pop_num()
        pool = ctx.pool.copy()
        pool_f = list(ctx.pool_f)

        slots: list[int] = []
        moves: list[np.ndarray] = []
        for i in range(pop_num):
            for j in range(i + 1, pop_num):
                a, xs = self._move(pool, pool_f, i, j, ctx, rng)
                slots.append(a)
                moves.append(xs)

        if moves:
            results = ctx.evaluate(np.vstack(moves))
            for a, xs, fit in zip(slots, moves, results):
                if improves(fit, ctx.pool_f[a]):
                    ctx.assign_from(a, xs, fit)
        self._alpha *= 0.95
        ctx.find_best()

    def __repr__(self) -> str:
        return f"FA(alpha={self.alpha}, beta_min={self.beta_min}, gamma={self.gamma})"


__all__ = ["FA"]
