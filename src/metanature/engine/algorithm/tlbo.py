"""Teaching-Learning-Based Optimization.

Reference:
    Rao, R.V., Savsani, V.J. and Vakharia, D.P. (2011). Teaching-learning-based
    optimization: a novel method for constrained mechanical design
    optimization problems. Computer-Aided Design 43(3), pp. 303-315.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from metanature.foundation.fitness import improves, is_dominated
from .base import Algorithm

if TYPE_CHECKING:
    from metanature.engine.context import Ctx
    from metanature.foundation.random import Rng


class TLBO(Algorithm):
    """Parameter-free TLBO; learners are updated one at a time."""

    name = "tlbo"
    min_pop_num = 2

    def _register(self, ctx: "Ctx", i: int, student: np.ndarray) -> None:
        fit = ctx.fitness(student)
        if improves(fit, ctx.pool_f[i]):
            ctx.assign_from(i, student, fit)
            ctx.best.update(student, fit)

    def _teaching(self, ctx: "Ctx", rng: "Rng", i: int) -> None:
        tf = 1 + rng.ub(2)
        teacher = ctx.best.sample_xs(rng)
        mean = ctx.pool.mean(axis=0)
        r = rng.rand(ctx.dim())
        self._register(ctx, i, ctx.clip(ctx.pool[i] + r * (teacher - tf * mean)))

    def _learning(self, ctx: "Ctx", rng: "Rng", i: int) -> None:
        j = rng.ub(ctx.pop_num() - 1)
        if j >= i:
            j += 1
        xs, peer = ctx.pool[i], ctx.pool[j]
        diff = peer - xs if is_dominated(ctx.pool_f[j], ctx.pool_f[i]) else xs - peer
        r = rng.rand(ctx.dim())
        self._register(ctx, i, ctx.clip(xs + r * diff))

    def generation(self, ctx: "Ctx", rng: "Rng") -> None:
        for i in range(ctx.pop_num()):
            self._teaching(ctx, rng, i)
            self._learning(ctx, rng, i)
        ctx.prune_fitness()


__all__ = ["TLBO"]
