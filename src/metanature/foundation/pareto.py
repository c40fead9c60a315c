"""
Best-element containers.

``SingleBest`` keeps one (design, fitness) pair; ``Pareto`` keeps a bounded set
of mutually non-dominated pairs. Both store private copies of what they are
given.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np

from metanature.foundation.exceptions import EmptyBestError
from metanature.foundation.fitness import clone_fitness, eval_fitness, is_dominated, is_valid

if TYPE_CHECKING:
    from metanature.foundation.random import Rng

UNLIMITED = sys.maxsize


def _as_row(xs: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.array(xs, dtype=float, copy=True)


class Best(ABC):
    """Interface shared by best-element containers."""

    def __init__(self, limit: int | None = None) -> None:
        self.limit = UNLIMITED if limit is None else int(limit)
        if self.limit <= 0:
            raise ValueError("best container limit must be positive.")

    @classmethod
    def from_limit(cls, limit: int | None = None) -> "Best":
        return cls(limit)

    @abstractmethod
    def update(self, xs: Sequence[float] | np.ndarray, fit: Any) -> None:
        """Offer one candidate to the container."""

    def update_all(self, pool: Iterable[Sequence[float] | np.ndarray], pool_f: Iterable[Any]) -> None:
        for xs, fit in zip(pool, pool_f):
            self.update(xs, fit)

    @abstractmethod
    def sample(self, rng: "Rng") -> tuple[np.ndarray, Any]:
        """Pick "the" best element; Pareto fronts pick a random member."""

    def sample_xs(self, rng: "Rng") -> np.ndarray:
        return self.sample(rng)[0]

    @abstractmethod
    def as_result(self) -> tuple[np.ndarray, Any]:
        """Final best element (smallest ``eval()`` for Pareto fronts)."""

    def as_result_fit(self) -> Any:
        return self.as_result()[1]

    def current_eval(self) -> float:
        return eval_fitness(self.as_result_fit())

    @abstractmethod
    def front(self) -> list[tuple[np.ndarray, Any]]:
        """Every retained element, oldest first."""

    @abstractmethod
    def __len__(self) -> int: ...

    def is_empty(self) -> bool:
        return len(self) == 0


class SingleBest(Best):
    """Holds at most one (design, fitness) pair."""

    def __init__(self, limit: int | None = None) -> None:
        super().__init__(None)
        self._xs: np.ndarray | None = None
        self._fit: Any = None

    def update(self, xs: Sequence[float] | np.ndarray, fit: Any) -> None:
        if self._xs is None:
            accept = True
        elif not is_valid(self._fit):
            # An invalid placeholder yields to the first valid candidate.
            accept = is_valid(fit)
        else:
            accept = is_valid(fit) and is_dominated(fit, self._fit)
        if accept:
            self._xs = _as_row(xs)
            self._fit = clone_fitness(fit)

    def sample(self, rng: "Rng") -> tuple[np.ndarray, Any]:
        return self.as_result()

    def as_result(self) -> tuple[np.ndarray, Any]:
        if self._xs is None:
            raise EmptyBestError()
        return self._xs, self._fit

    def front(self) -> list[tuple[np.ndarray, Any]]:
        if self._xs is None:
            return []
        return [(self._xs, self._fit)]

    def __len__(self) -> int:
        return 0 if self._xs is None else 1

    def __repr__(self) -> str:
        return f"SingleBest(fit={self._fit!r})"


class Pareto(Best):
    """Bounded set of mutually non-dominated (design, fitness) pairs.

    When an insertion pushes the set past ``limit``, the member with the
    largest ``eval()`` is evicted; on ties the oldest such member goes.
    """

    def __init__(self, limit: int | None = None) -> None:
        super().__init__(limit)
        self._xs: list[np.ndarray] = []
        self._fit: list[Any] = []

    def update(self, xs: Sequence[float] | np.ndarray, fit: Any) -> None:
        if not is_valid(fit):
            return
        removed = False
        rejected = False
        keep_xs: list[np.ndarray] = []
        keep_fit: list[Any] = []
        for m_xs, m_fit in zip(self._xs, self._fit):
            if is_dominated(fit, m_fit):
                removed = True
                continue
            if is_dominated(m_fit, fit):
                rejected = True
            keep_xs.append(m_xs)
            keep_fit.append(m_fit)
        if rejected and not removed:
            return
        keep_xs.append(_as_row(xs))
        keep_fit.append(clone_fitness(fit))
        if len(keep_fit) > self.limit:
            worst = 0
            worst_eval = eval_fitness(keep_fit[0])
            for i in range(1, len(keep_fit)):
                e = eval_fitness(keep_fit[i])
                if e > worst_eval:
                    worst, worst_eval = i, e
            del keep_xs[worst]
            del keep_fit[worst]
        self._xs = keep_xs
        self._fit = keep_fit

    def sample(self, rng: "Rng") -> tuple[np.ndarray, Any]:
        if not self._xs:
            raise EmptyBestError()
        i = rng.int_range(0, len(self._xs))
        return self._xs[i], self._fit[i]

    def as_result(self) -> tuple[np.ndarray, Any]:
        if not self._xs:
            raise EmptyBestError()
        best = 0
        best_eval = eval_fitness(self._fit[0])
        for i in range(1, len(self._fit)):
            e = eval_fitness(self._fit[i])
            if e < best_eval:
                best, best_eval = i, e
        return self._xs[best], self._fit[best]

    def front(self) -> list[tuple[np.ndarray, Any]]:
        return list(zip(self._xs, self._fit))

    def __len__(self) -> int:
        return len(self._xs)

    def __repr__(self) -> str:
        limit = "unlimited" if self.limit == UNLIMITED else self.limit
        return f"Pareto(size={len(self)}, limit={limit})"


__all__ = ["Best", "SingleBest", "Pareto", "UNLIMITED"]
