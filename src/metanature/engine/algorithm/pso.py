"""Particle Swarm Optimization.

Reference:
    Kennedy, J. and Eberhart, R. (1995). Particle swarm optimization.
    Proceedings of ICNN'95, pp. 1942-1948.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from metanature.foundation.fitness import clone_fitness, improves
from .base import Algorithm

if TYPE_CHECKING:
    from metanature.engine.context import Ctx
    from metanature.foundation.random import Rng


class PSO(Algorithm):
    """Particle swarm with a personal best per particle.

    Each particle moves to
    ``velocity * x + alpha * (past - x) + beta * (leader - x)``, clamped into the
    bounds, where ``alpha ~ U[0, cognition)``, ``beta ~ U[0, social)`` and the
    leader is sampled from the best container.
    """

    name = "pso"

    def __init__(self, cognition: float = 2.05, social: float = 2.05, velocity: float = 1.3) -> None:
        self.cognition = float(cognition)
        self.social = float(social)
        self.velocity = float(velocity)
        self.past: np.ndarray | None = None
        self.past_f: list[Any] = []

    def init(self, ctx: "Ctx", rng: "Rng") -> None:
        self.past = ctx.pool.copy()
        self.past_f = [clone_fitness(f) for f in ctx.pool_f]

    def generation(self, ctx: "Ctx", rng: "Rng") -> None:
        if self.past is None:
            self.init(ctx, rng)
        moved = np.empty_like(ctx.pool)
        for i in range(ctx.pop_num()):
            xs = ctx.pool[i]
            alpha = rng.ub(self.cognition)
            beta = rng.ub(self.social)
            leader = ctx.best.sample_xs(rng)
            v = self.velocity * xs + alpha * (self.past[i] - xs) + beta * (leader - xs)
            moved[i] = ctx.clip(v)

        ctx.pool = moved
        ctx.pool_f = ctx.evaluate(moved)
        for i, fit in enumerate(ctx.pool_f):
            if improves(fit, self.past_f[i]):
                self.past[i] = moved[i]
                self.past_f[i] = clone_fitness(fit)
        ctx.find_best()

    def __repr__(self) -> str:
        return f"PSO(cognition={self.cognition}, social={self.social}, velocity={self.velocity})"


__all__ = ["PSO"]
