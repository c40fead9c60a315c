"""
Solver orchestration.

``Solver.build(config, func)`` returns a :class:`SolverBuilder`; its fluent
setters collect the run settings and :meth:`SolverBuilder.solve` runs

    callback(ctx); if task(ctx): break; ctx.gen += 1; algorithm.generation(ctx, rng)

until the task fires, returning a :class:`Solver` holding the final context.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

import numpy as np

from metanature.engine.algorithm.base import Algorithm
from metanature.engine.algorithm.config.base import AlgorithmConfig
from metanature.engine.algorithm.registry import resolve_config
from metanature.engine.context import Ctx
from metanature.engine.pool import PoolPolicy, ReadyPool, UniformPool
from metanature.engine.termination import Task, Termination, max_gen, max_gen_of
from metanature.foundation.eval import EvaluationBackend
from metanature.foundation.eval.backends import resolve_eval_backend
from metanature.foundation.exceptions import ConfigurationError, PopulationSizeError
from metanature.foundation.fitness import Product, is_valid
from metanature.foundation.pareto import UNLIMITED
from metanature.foundation.problem import ObjFunc, bound_array
from metanature.foundation.random import Rng

DEFAULT_POP_NUM = 200
DEFAULT_MAX_GEN = 200


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _noop(ctx: Ctx) -> None:
    return None


class SolverBuilder:
    """Collects solve settings; every setter returns the builder."""

    def __init__(self, algorithm: AlgorithmConfig | Algorithm, func: ObjFunc) -> None:
        self._config: AlgorithmConfig | None = None
        self._algorithm: Algorithm | None = None
        if isinstance(algorithm, Algorithm):
            self._algorithm = algorithm
        else:
            self._config = resolve_config(algorithm)
        self._func = func
        self._pop_num: int | None = None
        self._seed: int | None = None
        self._pool: PoolPolicy = UniformPool()
        self._pareto_limit: int | None = None
        self._task: Task = max_gen(DEFAULT_MAX_GEN)
        self._callback: Callable[[Ctx], Any] = _noop
        self._regenerate = False
        self._backend: EvaluationBackend | str = "serial"
        self._n_workers: int | None = None
        self._chunk_size: int | None = None

    # ------------------------------------------------------------------
    # Fluent setters
    # ------------------------------------------------------------------

    def pop_num(self, n: int) -> "SolverBuilder":
        self._pop_num = n
        return self

    def seed(self, seed: int | None) -> "SolverBuilder":
        self._seed = seed
        return self

    def init_pool(self, pool: PoolPolicy) -> "SolverBuilder":
        if not isinstance(pool, PoolPolicy):
            raise ConfigurationError(
                f"init_pool expects a pool policy, got {type(pool).__name__}.",
                suggestion="Use UniformPool(), UniformBy(filter), GaussianPool(mean, std), "
                "LatinHypercubePool() or ReadyPool(pool, pool_f)",
            )
        self._pool = pool
        return self

    def pareto_limit(self, limit: int | None) -> "SolverBuilder":
        if limit is not None and int(limit) <= 0:
            raise ConfigurationError(f"pareto_limit must be positive, got {limit!r}.")
        self._pareto_limit = limit
        return self

    def task(self, task: Task) -> "SolverBuilder":
        self._task = task
        return self

    def callback(self, callback: Callable[[Ctx], Any]) -> "SolverBuilder":
        self._callback = callback
        return self

    def regenerate(self, flag: bool = True) -> "SolverBuilder":
        self._regenerate = bool(flag)
        return self

    def eval_backend(
        self,
        backend: EvaluationBackend | str,
        n_workers: int | None = None,
        chunk_size: int | None = None,
    ) -> "SolverBuilder":
        self._backend = backend
        self._n_workers = n_workers
        self._chunk_size = chunk_size
        return self

    # ------------------------------------------------------------------
    # Solve
    # ------------------------------------------------------------------

    def _resolve_pop_num(self, algorithm: Algorithm) -> int:
        if self._pop_num is not None:
            n = self._pop_num
            if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
                raise PopulationSizeError(n)
            n = int(n)
        elif isinstance(self._pool, ReadyPool):
            n = len(self._pool)
        elif self._config is not None:
            n = self._config.default_pop_num()
        else:
            n = DEFAULT_POP_NUM
        if n < algorithm.min_pop_num:
            raise PopulationSizeError(n, algorithm.min_pop_num, algorithm.name.upper())
        return n

    def _resolve_backend(self) -> EvaluationBackend:
        if isinstance(self._backend, str):
            return resolve_eval_backend(self._backend, n_workers=self._n_workers, chunk_size=self._chunk_size)
        return self._backend

    def _build_ctx(self, bounds: np.ndarray, pop_num: int, rng: Rng, evaluator: EvaluationBackend) -> Ctx:
        pool = self._pool.generate(bounds, pop_num, rng)
        if isinstance(self._pool, ReadyPool):
            ctx = Ctx(self._func, pool, self._pool.pool_f, pareto_limit=self._pareto_limit, evaluator=evaluator)
            if self._pool.sorted:
                ctx.best.update(ctx.pool[0], ctx.pool_f[0])
                ctx.prune_fitness()
            else:
                ctx.find_best()
            return ctx
        return Ctx.from_pool(self._func, pool, pareto_limit=self._pareto_limit, evaluator=evaluator)

    def _regenerate_invalid(self, ctx: Ctx, rng: Rng) -> None:
        invalid = [i for i, f in enumerate(ctx.pool_f) if not is_valid(f)]
        if not invalid:
            return
        rows = np.vstack([ctx.random_xs(rng) for _ in invalid])
        for i, xs, fit in zip(invalid, rows, ctx.evaluate(rows)):
            ctx.assign_from(i, xs, fit)
        _logger().debug("gen %d: regenerated %d invalid individuals", ctx.gen, len(invalid))
        ctx.find_best()

    def solve(self) -> "Solver":
        """Validate the settings, run the loop and return the result.

        Raises:
            ConfigurationError: invalid population size, seed, pool, backend or algorithm settings.
            ProblemError: the objective has no variables or inconsistent bounds.
        """
        bounds = bound_array(self._func)
        dim = bounds.shape[0]
        algorithm = self._algorithm if self._algorithm is not None else self._config.algorithm()
        pop_num = self._resolve_pop_num(algorithm)
        self._pool.validate(pop_num, dim)
        rng = Rng(self._seed)
        evaluator = self._resolve_backend()

        log = _logger()
        log.debug("seed=%d pool=%r pop_num=%d dim=%d backend=%s", rng.seed, self._pool, pop_num, dim,
                  getattr(evaluator, "name", type(evaluator).__name__))

        task = self._task
        if isinstance(task, Termination):
            task.reset()
        start = time.perf_counter()
        try:
            ctx = self._build_ctx(bounds, pop_num, rng, evaluator)
            ctx.max_gen = max_gen_of(task)
            algorithm.init(ctx, rng)
            while True:
                self._callback(ctx)
                if task(ctx):
                    break
                ctx.gen += 1
                algorithm.generation(ctx, rng)
                if self._regenerate:
                    self._regenerate_invalid(ctx, rng)
        finally:
            if isinstance(self._backend, str):
                evaluator.close()

        elapsed = time.perf_counter() - start
        log.debug("stopped after %d generations", ctx.gen)
        if ctx.best.is_empty():
            log.info("%s finished: %d generations in %.3fs, no valid solution (seed=%d)",
                     algorithm.name.upper(), ctx.gen, elapsed, rng.seed)
        else:
            log.info("%s finished: %d generations in %.3fs, best=%.6g (seed=%d)",
                     algorithm.name.upper(), ctx.gen, elapsed, ctx.best_eval(), rng.seed)
        return Solver(ctx, rng.seed)


class Solver:
    """Result of a finished solve.

    Examples
    --------
    >>> s = Solver.build(DEConfig().fixed(), func).seed(0).task(max_gen(20)).solve()
    >>> s.best_parameters(), s.best_fitness()
    """

    def __init__(self, ctx: Ctx, seed: int) -> None:
        self._ctx = ctx
        self._seed = seed

    @staticmethod
    def build(algorithm: AlgorithmConfig | Algorithm | Any, func: ObjFunc) -> SolverBuilder:
        """Start configuring a solve with a strategy configuration (or instance)."""
        return SolverBuilder(algorithm, func)

    @staticmethod
    def build_boxed(algorithm: str | Mapping[str, Any] | AlgorithmConfig, func: ObjFunc) -> SolverBuilder:
        """Start configuring a solve with a strategy chosen at runtime.

        ``algorithm`` may be a registry name (``"de"``), a mapping such as
        ``{"algorithm": "de", "f": 0.5}``, or a frozen configuration.
        """
        return SolverBuilder(resolve_config(algorithm), func)

    def best_parameters(self) -> np.ndarray:
        return self._ctx.as_best_xs()

    def best_fitness(self) -> Any:
        return self._ctx.as_best_fitness()

    def best_eval(self) -> float:
        return self._ctx.best_eval()

    def result(self) -> Any:
        """Product of the best fitness when it carries one, otherwise the best fitness."""
        fit = self.best_fitness()
        if isinstance(fit, Product) and fit.has_product():
            return fit.product
        return fit

    def pareto_front(self) -> list[tuple[np.ndarray, Any]]:
        return self._ctx.best.front()

    def seed(self) -> int:
        return self._seed

    def pop_num(self) -> int:
        return self._ctx.pop_num()

    def dim(self) -> int:
        return self._ctx.dim()

    def gen(self) -> int:
        return self._ctx.gen

    def func(self) -> ObjFunc:
        return self._ctx.func

    def ctx(self) -> Ctx:
        return self._ctx

    def __repr__(self) -> str:
        limit = self._ctx.best.limit
        front = "" if limit == UNLIMITED else f", pareto_limit={limit}"
        return f"Solver(gen={self.gen()}, pop_num={self.pop_num()}, dim={self.dim()}, seed={self._seed}{front})"


__all__ = ["DEFAULT_MAX_GEN", "DEFAULT_POP_NUM", "Solver", "SolverBuilder"]
