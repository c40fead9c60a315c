"""
Optimization context shared by the solver loop and the active strategy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from metanature.foundation.eval import EvaluationBackend
from metanature.foundation.eval.backends import SerialEvalBackend
from metanature.foundation.fitness import best_type_of, clone_fitness, mark_not_best
from metanature.foundation.pareto import Best
from metanature.foundation.problem import ObjFunc, bound_array
from metanature.foundation.random import Rng


class Ctx:
    """Population, fitness values and best record of one solve.

    Attributes
    ----------
    func : ObjFunc
        The objective being minimized.
    pool : np.ndarray
        Design vectors, shape ``(pop_num, dim)``.
    pool_f : list
        Fitness of each row of ``pool``.
    best : Best
        Best container (``SingleBest`` or ``Pareto``) chosen from the fitness type.
    gen : int
        Completed generations.
    evaluator : EvaluationBackend
        Backend used by :meth:`evaluate`.
    max_gen : int or None
        Generation budget when the termination task declares one.
    """

    def __init__(
        self,
        func: ObjFunc,
        pool: np.ndarray,
        pool_f: Sequence[Any],
        *,
        best: Best | None = None,
        pareto_limit: int | None = None,
        evaluator: EvaluationBackend | None = None,
    ) -> None:
        self.func = func
        self._bounds = bound_array(func)
        self.pool = np.array(pool, dtype=float)
        self.pool_f = list(pool_f)
        if best is None:
            if not self.pool_f:
                raise ValueError("cannot infer the best container from an empty pool.")
            best = best_type_of(self.pool_f[0]).from_limit(pareto_limit)
        self.best = best
        self.gen = 0
        self.evaluator: EvaluationBackend = evaluator or SerialEvalBackend()
        self.max_gen: int | None = None

    @classmethod
    def from_pool(
        cls,
        func: ObjFunc,
        pool: np.ndarray,
        *,
        pareto_limit: int | None = None,
        evaluator: EvaluationBackend | None = None,
    ) -> "Ctx":
        """Evaluate ``pool`` in one batch and establish the first best."""
        evaluator = evaluator or SerialEvalBackend()
        pool_f = evaluator.map(func, np.asarray(pool, dtype=float))
        ctx = cls(func, pool, pool_f, pareto_limit=pareto_limit, evaluator=evaluator)
        ctx.find_best()
        return ctx

    # ------------------------------------------------------------------
    # Shape and bounds
    # ------------------------------------------------------------------

    def pop_num(self) -> int:
        return len(self.pool_f)

    def dim(self) -> int:
        return int(self._bounds.shape[0])

    def bound(self) -> Any:
        return self.func.bound()

    def bound_of(self, s: int) -> tuple[float, float]:
        lo, hi = self._bounds[s]
        return float(lo), float(hi)

    def lb(self, s: int) -> float:
        return float(self._bounds[s, 0])

    def ub(self, s: int) -> float:
        return float(self._bounds[s, 1])

    def bound_width(self, s: int) -> float:
        return float(self._bounds[s, 1] - self._bounds[s, 0])

    def bound_range(self, s: int) -> tuple[float, float]:
        return self.bound_of(s)

    @property
    def lower(self) -> np.ndarray:
        return self._bounds[:, 0]

    @property
    def upper(self) -> np.ndarray:
        return self._bounds[:, 1]

    def clamp(self, s: int, v: float) -> float:
        """Project ``v`` into ``[lb(s), ub(s)]``."""
        lo, hi = self._bounds[s]
        return float(min(max(v, lo), hi))

    def clip(self, xs: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`clamp` over a whole design vector (or batch)."""
        return np.clip(xs, self._bounds[:, 0], self._bounds[:, 1])

    def in_bounds(self, xs: np.ndarray) -> bool:
        return bool(np.all(xs >= self._bounds[:, 0]) and np.all(xs <= self._bounds[:, 1]))

    def random_xs(self, rng: Rng) -> np.ndarray:
        """A fresh uniform in-bounds design vector."""
        return np.asarray(rng.range(self._bounds[:, 0], self._bounds[:, 1], self.dim()), dtype=float)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def fitness(self, xs: np.ndarray) -> Any:
        return self.func.fitness(xs)

    def evaluate(self, rows: np.ndarray | Sequence[np.ndarray]) -> list[Any]:
        """Fitness of every row through the evaluation backend, in input order."""
        if len(rows) == 0:
            return []
        return list(self.evaluator.map(self.func, rows))

    # ------------------------------------------------------------------
    # Population and best bookkeeping
    # ------------------------------------------------------------------

    def find_best(self) -> None:
        self.best.update_all(self.pool, self.pool_f)
        self.prune_fitness()

    def prune_fitness(self) -> None:
        for f in self.pool_f:
            mark_not_best(f)

    def assign_from(self, i: int, xs: np.ndarray, f: Any) -> None:
        self.pool[i] = xs
        self.pool_f[i] = f

    def assign_from_best(self, i: int) -> None:
        xs, f = self.best.as_result()
        self.assign_from(i, xs, clone_fitness(f))

    def as_best_result(self) -> tuple[np.ndarray, Any]:
        return self.best.as_result()

    def as_best_xs(self) -> np.ndarray:
        return self.best.as_result()[0]

    def as_best_fitness(self) -> Any:
        return self.best.as_result_fit()

    def best_eval(self) -> float:
        return self.best.current_eval()

    def __repr__(self) -> str:
        return f"Ctx(gen={self.gen}, pop_num={self.pop_num()}, dim={self.dim()}, best={self.best!r})"


__all__ = ["Ctx"]
