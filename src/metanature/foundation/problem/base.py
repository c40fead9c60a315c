"""
Base class for bounded objective functions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from metanature.foundation.exceptions import BoundsError, ProblemDimensionError

BoundLike = Sequence[Sequence[float]] | np.ndarray


def bound_array(func: "ObjFunc") -> np.ndarray:
    """Validate ``func.bound()`` and return it as a ``(dim, 2)`` float array.

    Raises:
        ProblemDimensionError: the objective has no variables.
        BoundsError: a bound is not a pair, or lower > upper somewhere.
    """
    try:
        arr = np.asarray(func.bound(), dtype=float)
    except (TypeError, ValueError) as exc:
        raise BoundsError(f"Bounds could not be read as [lower, upper] pairs: {exc}") from exc
    if arr.size == 0:
        raise ProblemDimensionError("Dimension should be greater than 0.", dim=0)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise BoundsError(f"Bounds must have shape (dim, 2), got {arr.shape}.")
    if np.isnan(arr).any():
        raise BoundsError("Bounds must not contain NaN.")
    bad = np.flatnonzero(arr[:, 0] > arr[:, 1])
    if bad.size:
        s = int(bad[0])
        raise BoundsError(f"Lower bound exceeds upper bound for variable {s}: [{arr[s, 0]}, {arr[s, 1]}].")
    return arr


class ObjFunc(ABC):
    """Base class for objective functions over a box.

    **Required:** implement :meth:`bound` (one ``[lower, upper]`` pair per
    variable, cheap and stable for a solve) and :meth:`fitness`.

    ``fitness`` must be a pure function of ``xs`` and immutable data held by the
    object: evaluation backends may call it from several threads or processes
    at once.

    Example::

        import numpy as np
        from metanature import ObjFunc, Solver, DEConfig

        class MyFunc(ObjFunc):
            def bound(self):
                return [[0.0, 50.0]] * 3

            def fitness(self, xs):
                return float(np.sum(xs * xs))

        s = Solver.build(DEConfig().fixed(), MyFunc()).seed(0).solve()
    """

    @abstractmethod
    def bound(self) -> BoundLike:
        """``[lower, upper]`` pairs, one per variable."""

    @abstractmethod
    def fitness(self, xs: np.ndarray) -> Any:
        """Fitness of one design vector; smaller is better."""

    # ------------------------------------------------------------------
    # Helpers derived from bound()
    # ------------------------------------------------------------------

    def dim(self) -> int:
        return len(self.bound())

    def bound_of(self, s: int) -> tuple[float, float]:
        lo, hi = self.bound()[s]
        return float(lo), float(hi)

    def lb(self, s: int) -> float:
        return self.bound_of(s)[0]

    def ub(self, s: int) -> float:
        return self.bound_of(s)[1]

    def bound_width(self, s: int) -> float:
        lo, hi = self.bound_of(s)
        return hi - lo

    def bound_range(self, s: int) -> tuple[float, float]:
        """Inclusive ``(lower, upper)`` range of variable ``s``."""
        return self.bound_of(s)

    def lower(self) -> np.ndarray:
        return np.asarray(self.bound(), dtype=float)[:, 0]

    def upper(self) -> np.ndarray:
        return np.asarray(self.bound(), dtype=float)[:, 1]

    def clamp(self, s: int, v: float) -> float:
        """Project ``v`` into the bound of variable ``s``."""
        lo, hi = self.bound_of(s)
        return min(max(v, lo), hi)


class Fx(ObjFunc):
    """Objective built from a bound list and a plain callable.

    >>> f = Fx([[-50.0, 50.0]] * 4, lambda x: x[0] ** 2 + 8 * x[1] ** 2 + x[2] ** 2 + x[3] ** 2)

    Lambdas cannot be pickled; use a module-level function with the
    multiprocessing backend.
    """

    def __init__(self, bound: BoundLike, func: Callable[[np.ndarray], Any]) -> None:
        self._bound = [(float(lo), float(hi)) for lo, hi in bound]
        self._func = func

    def bound(self) -> list[tuple[float, float]]:
        return self._bound

    def fitness(self, xs: np.ndarray) -> Any:
        return self._func(xs)


__all__ = ["BoundLike", "Fx", "ObjFunc", "bound_array"]
