from __future__ import annotations

import math
import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Any, Optional

import numpy as np

from metanature.foundation.exceptions import InvalidEngineError
from . import EvaluationBackend

BACKENDS = ("serial", "thread", "multiprocessing")


def _eval_chunk(func: Any, rows: np.ndarray) -> list[Any]:
    """Worker helper to evaluate a chunk; kept at module level for pickling."""
    return [func.fitness(xs) for xs in rows]


def _chunk_slices(n: int, n_workers: int, chunk_size: Optional[int]) -> list[tuple[int, int]]:
    if chunk_size is not None and chunk_size > 0:
        size = chunk_size
    else:
        size = max(1, math.ceil(n / n_workers))
    return [(i, min(i + size, n)) for i in range(0, n, size)]


class SerialEvalBackend(EvaluationBackend):
    """Synchronous in-process evaluation (default)."""

    name = "serial"

    def map(self, func: Any, rows) -> list[Any]:
        return _eval_chunk(func, rows)

    def close(self) -> None:
        return None


class _PooledEvalBackend(EvaluationBackend):
    """Fork/join evaluation over a lazily created executor."""

    name = "pooled"

    def __init__(self, n_workers: Optional[int] = None, chunk_size: Optional[int] = None):
        self.n_workers = max(1, n_workers or os.cpu_count() or 1)
        self.chunk_size = chunk_size
        self._executor: Executor | None = None

    def _make_executor(self) -> Executor:
        raise NotImplementedError

    def map(self, func: Any, rows) -> list[Any]:
        n = len(rows)
        if self.n_workers <= 1 or n <= 1:
            return _eval_chunk(func, rows)
        if self._executor is None:
            self._executor = self._make_executor()

        rows = np.asarray(rows, dtype=float)
        slices = _chunk_slices(n, self.n_workers, self.chunk_size)
        future_map = {self._executor.submit(_eval_chunk, func, rows[start:end]): start for start, end in slices}

        # Restore original order
        out: list[Any] = [None] * n
        for fut in as_completed(future_map):
            start = future_map[fut]
            part = fut.result()
            out[start : start + len(part)] = part
        return out

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ThreadEvalBackend(_PooledEvalBackend):
    """
    Parallel evaluation on a thread pool.

    Notes:
        - The objective is shared between threads; ``fitness`` must not mutate it.
        - Pays off when ``fitness`` releases the GIL (numpy kernels, I/O, native code).
    """

    name = "thread"

    def _make_executor(self) -> Executor:
        return ThreadPoolExecutor(max_workers=self.n_workers, thread_name_prefix="metanature-eval")


class MultiprocessingEvalBackend(_PooledEvalBackend):
    """
    Parallel evaluation using multiprocessing.

    Notes:
        - Requires the objective instance and its fitness values to be picklable.
        - Best suited for expensive evaluations; overhead dominates for tiny problems.
    """

    name = "multiprocessing"

    def _make_executor(self) -> Executor:
        return ProcessPoolExecutor(max_workers=self.n_workers)


def resolve_eval_backend(
    name: str | None, *, n_workers: Optional[int] = None, chunk_size: Optional[int] = None
) -> EvaluationBackend:
    key = (name or "serial").lower()
    if key == "serial":
        return SerialEvalBackend()
    if key in ("thread", "threads", "threading"):
        return ThreadEvalBackend(n_workers=n_workers, chunk_size=chunk_size)
    if key in ("multiprocessing", "process", "processes"):
        return MultiprocessingEvalBackend(n_workers=n_workers, chunk_size=chunk_size)
    raise InvalidEngineError(str(name), list(BACKENDS))


__all__ = [
    "BACKENDS",
    "MultiprocessingEvalBackend",
    "SerialEvalBackend",
    "ThreadEvalBackend",
    "resolve_eval_backend",
]
