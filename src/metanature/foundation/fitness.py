"""
Fitness values returned by objective functions.

A fitness is either a plain real number (single objective, smaller is better)
or an object implementing :class:`Fitness`. The module-level helpers
(:func:`is_dominated`, :func:`eval_fitness`, :func:`is_valid`,
:func:`best_type_of`) accept both, so strategies never branch on the kind of
fitness they handle.
"""

from __future__ import annotations

import copy
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from numbers import Real
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import numpy as np

if TYPE_CHECKING:
    from metanature.foundation.pareto import Best

P = TypeVar("P")


class Fitness(ABC):
    """Protocol for structured fitness values.

    Subclasses define a dominance relation and a scalar used for reporting and
    ranking. A value is invalid (never chosen as best) when :meth:`is_valid`
    returns ``False``; the default checks that :meth:`eval` is not NaN.
    """

    #: Best container class used to track this kind of fitness.
    best_type: type["Best"] | None = None

    @abstractmethod
    def is_dominated(self, other: Any) -> bool:
        """Return ``True`` when ``self`` is at least as good as ``other``."""

    @abstractmethod
    def eval(self) -> float:
        """Scalar used for final ranking and Pareto eviction."""

    def is_valid(self) -> bool:
        return not math.isnan(self.eval())

    def mark_not_best(self) -> None:
        """Drop data only worth keeping for the best element (no-op by default)."""
        return None


class MultiObjective(Fitness):
    """Vector of objectives compared by Pareto dominance.

    ``rank_by`` selects the objective this fitness reduces to when a single
    scalar is needed (result ranking, front eviction).
    """

    __slots__ = ("values", "rank_by")

    def __init__(self, values: Iterable[float], rank_by: int = 0) -> None:
        self.values = np.array(list(values), dtype=float)
        if self.values.ndim != 1 or self.values.size == 0:
            raise ValueError("MultiObjective expects a non-empty 1D sequence of objective values.")
        if not 0 <= rank_by < self.values.size:
            raise ValueError(f"rank_by={rank_by} is out of range for {self.values.size} objectives.")
        self.rank_by = int(rank_by)

    @property
    def n_obj(self) -> int:
        return int(self.values.size)

    def is_dominated(self, other: Any) -> bool:
        o = other.values if isinstance(other, MultiObjective) else np.asarray(other, dtype=float)
        return bool(np.all(self.values <= o) and np.any(self.values < o))

    def eval(self) -> float:
        return float(self.values[self.rank_by])

    def is_valid(self) -> bool:
        return not bool(np.isnan(self.values).any())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiObjective):
            return NotImplemented
        return self.rank_by == other.rank_by and bool(np.array_equal(self.values, other.values))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        vals = ", ".join(f"{v:g}" for v in self.values)
        return f"MultiObjective([{vals}], rank_by={self.rank_by})"


class Product(Fitness, Generic[P]):
    """A fitness carrying a final product (e.g. a decoded design).

    Ordering delegates to the wrapped fitness. Only the best element keeps its
    product: :meth:`mark_not_best` drops it from population entries.
    """

    __slots__ = ("fitness", "_product")

    def __init__(self, fitness: Any, product: P) -> None:
        self.fitness = fitness
        self._product: P | None = product

    @property
    def best_type(self) -> type["Best"]:  # type: ignore[override]
        return best_type_of(self.fitness)

    @property
    def product(self) -> P | None:
        return self._product

    def has_product(self) -> bool:
        return self._product is not None

    def is_dominated(self, other: Any) -> bool:
        o = other.fitness if isinstance(other, Product) else other
        return is_dominated(self.fitness, o)

    def eval(self) -> float:
        return eval_fitness(self.fitness)

    def is_valid(self) -> bool:
        return is_valid(self.fitness)

    def mark_not_best(self) -> None:
        self._product = None

    def __repr__(self) -> str:
        return f"Product(fitness={self.fitness!r}, product={'<dropped>' if self._product is None else self._product!r})"


# ----------------------------------------------------------------------
# Helpers accepting numbers and Fitness objects alike
# ----------------------------------------------------------------------


def is_dominated(a: Any, b: Any) -> bool:
    """``True`` when ``a`` is at least as good as ``b`` (for numbers: ``a <= b``)."""
    if isinstance(a, Fitness):
        return a.is_dominated(b)
    return bool(a <= b)


def improves(new: Any, old: Any) -> bool:
    """Replacement rule for population slots: a valid ``new`` beats an invalid ``old``."""
    if not is_valid(new):
        return False
    if not is_valid(old):
        return True
    return is_dominated(new, old)


def eval_fitness(a: Any) -> float:
    if isinstance(a, Fitness):
        return a.eval()
    return float(a)


def is_valid(a: Any) -> bool:
    """A fitness is invalid when it cannot be compared with itself (NaN)."""
    if isinstance(a, Fitness):
        return a.is_valid()
    if isinstance(a, Real):
        return a == a
    return bool(a <= a)


def mark_not_best(a: Any) -> None:
    if isinstance(a, Fitness):
        a.mark_not_best()


def clone_fitness(a: Any) -> Any:
    """Independent copy, so later pruning of the source does not reach the copy."""
    if isinstance(a, Fitness):
        return copy.copy(a)
    return a


def best_type_of(a: Any) -> type["Best"]:
    """Best container class for a fitness value: Pareto for multi-objective, otherwise SingleBest."""
    from metanature.foundation.pareto import Pareto, SingleBest

    if isinstance(a, MultiObjective):
        return Pareto
    if isinstance(a, Fitness):
        declared = a.best_type
        if declared is not None:
            return declared
    return SingleBest


__all__ = [
    "Fitness",
    "MultiObjective",
    "Product",
    "best_type_of",
    "clone_fitness",
    "eval_fitness",
    "improves",
    "is_dominated",
    "is_valid",
    "mark_not_best",
]
