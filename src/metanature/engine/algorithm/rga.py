"""Real-coded Genetic Algorithm.

Tournament selection with elitism, three-way arithmetic crossover and
non-uniform mutation.

Reference:
    Michalewicz, Z. (1996). Genetic Algorithms + Data Structures = Evolution
    Programs, 3rd ed. Springer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from metanature.foundation.fitness import improves
from .base import Algorithm

if TYPE_CHECKING:
    from metanature.engine.context import Ctx
    from metanature.foundation.random import Rng


def _strictly_better(a: Any, b: Any) -> bool:
    return improves(a, b) and not improves(b, a)


def _two_best(fits: list[Any]) -> list[int]:
    """Indices of the two best of three candidates, best first."""
    order = [0, 1, 2]
    for x, y in ((0, 1), (0, 2), (1, 2)):
        if _strictly_better(fits[order[y]], fits[order[x]]):
            order[x], order[y] = order[y], order[x]
    return order[:2]


class RGA(Algorithm):
    """Real-coded genetic algorithm.

    Args:
        cross: Probability that a consecutive pair is recombined.
        mutate: Probability that an individual is mutated.
        win: Probability that the better contestant wins a tournament.
        delta: Exponent shrinking the mutation step as the run progresses.
    """

    name = "rga"
    min_pop_num = 2

    def __init__(self, cross: float = 0.95, mutate: float = 0.05, win: float = 0.95, delta: float = 5.0) -> None:
        self.cross = float(cross)
        self.mutate = float(mutate)
        self.win = float(win)
        self.delta = float(delta)

    def generation(self, ctx: "Ctx", rng: "Rng") -> None:
        self._select(ctx, rng)
        self._crossover(ctx, rng)
        self._mutate(ctx, rng)
        ctx.find_best()

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _select(self, ctx: "Ctx", rng: "Rng") -> None:
        pop_num = ctx.pop_num()
        new_pool = np.empty_like(ctx.pool)
        new_f: list[Any] = [None] * pop_num
        for i in range(pop_num):
            j = rng.ub(pop_num)
            k = rng.ub(pop_num)
            winner = k if _strictly_better(ctx.pool_f[k], ctx.pool_f[j]) and rng.maybe(self.win) else j
            new_pool[i] = ctx.pool[winner]
            new_f[i] = ctx.pool_f[winner]
        ctx.pool = new_pool
        ctx.pool_f = new_f
        ctx.assign_from_best(rng.ub(pop_num))

    def _check(self, ctx: "Ctx", s: int, v: float, rng: "Rng") -> float:
        # Out-of-range values are resampled uniformly in the bound.
        lo, hi = ctx.bound_of(s)
        return rng.clamp(v, lo, hi)

    def _crossover(self, ctx: "Ctx", rng: "Rng") -> None:
        dim = ctx.dim()
        parents: list[int] = []
        children: list[np.ndarray] = []
        for i in range(0, ctx.pop_num() - 1, 2):
            if not rng.maybe(self.cross):
                continue
            a, b = ctx.pool[i], ctx.pool[i + 1]
            tmp = np.empty((3, dim))
            tmp[0] = 0.5 * a + 0.5 * b
            for s in range(dim):
                tmp[1, s] = self._check(ctx, s, 1.5 * a[s] - 0.5 * b[s], rng)
                tmp[2, s] = self._check(ctx, s, -0.5 * a[s] + 1.5 * b[s], rng)
            parents.append(i)
            children.append(tmp)
        if not children:
            return

        results = ctx.evaluate(np.vstack(children))
        for n, i in enumerate(parents):
            fits = results[3 * n : 3 * n + 3]
            first, second = _two_best(fits)
            ctx.assign_from(i, children[n][first], fits[first])
            ctx.assign_from(i + 1, children[n][second], fits[second])

    def _step(self, ctx: "Ctx", y: float, rng: "Rng") -> float:
        r = ctx.gen / ctx.max_gen if ctx.max_gen else 0.0
        return y * rng.rand() * (1.0 - min(r, 1.0)) ** self.delta

    def _mutate(self, ctx: "Ctx", rng: "Rng") -> None:
        slots: list[int] = []
        rows: list[np.ndarray] = []
        for i in range(ctx.pop_num()):
            if not rng.maybe(self.mutate):
                continue
            xs = ctx.pool[i].copy()
            s = rng.ub(ctx.dim())
            if rng.maybe(0.5):
                xs[s] += self._step(ctx, ctx.ub(s) - xs[s], rng)
            else:
                xs[s] -= self._step(ctx, xs[s] - ctx.lb(s), rng)
            slots.append(i)
            rows.append(xs)
        if not rows:
            return
        for i, xs, fit in zip(slots, rows, ctx.evaluate(np.vstack(rows))):
            ctx.assign_from(i, xs, fit)

    def __repr__(self) -> str:
        return f"RGA(cross={self.cross}, mutate={self.mutate}, win={self.win}, delta={self.delta})"


__all__ = ["RGA"]
