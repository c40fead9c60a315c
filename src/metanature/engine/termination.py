"""
Termination presets.

A task is any ``ctx -> bool`` callable; the solver stops when it returns
``True``. The presets below cover the common budgets and expose what they know
(e.g. ``max_gen``) so strategies can schedule themselves.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from metanature.engine.context import Ctx

Task = Callable[["Ctx"], bool]


class Termination:
    """Base class for stateful stop conditions; ``reset`` runs once per solve."""

    max_gen: int | None = None

    def reset(self) -> None:
        return None

    def __call__(self, ctx: "Ctx") -> bool:
        raise NotImplementedError


class MaxGen(Termination):
    """Stop after ``n`` generations."""

    def __init__(self, n: int) -> None:
        if int(n) < 0:
            raise ValueError("max_gen must be non-negative.")
        self.max_gen = int(n)

    def __call__(self, ctx: "Ctx") -> bool:
        return ctx.gen >= self.max_gen

    def __repr__(self) -> str:
        return f"MaxGen({self.max_gen})"


class MinFit(Termination):
    """Stop once the best ``eval()`` reaches ``value``."""

    def __init__(self, value: float) -> None:
        self.value = float(value)

    def __call__(self, ctx: "Ctx") -> bool:
        return ctx.best_eval() <= self.value

    def __repr__(self) -> str:
        return f"MinFit({self.value})"


class MaxTime(Termination):
    """Stop once ``seconds`` of wall-clock time have elapsed since the first check."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.perf_counter) -> None:
        self.seconds = float(seconds)
        self._clock = clock
        self._start: float | None = None

    def reset(self) -> None:
        self._start = None

    def __call__(self, ctx: "Ctx") -> bool:
        now = self._clock()
        if self._start is None:
            self._start = now
        return now - self._start >= self.seconds

    def __repr__(self) -> str:
        return f"MaxTime({self.seconds})"


class SlowDown(Termination):
    """Stop when the latest improvement of the best falls below ``rate`` times the previous one."""

    def __init__(self, rate: float) -> None:
        self.rate = float(rate)
        self._last: float | None = None
        self._last_diff = 0.0

    def reset(self) -> None:
        self._last = None
        self._last_diff = 0.0

    def __call__(self, ctx: "Ctx") -> bool:
        current = ctx.best_eval()
        if self._last is None:
            self._last = current
            return False
        diff = self._last - current
        self._last = current
        stop = self._last_diff > 0.0 and diff / self._last_diff < self.rate
        if diff > 0.0:
            self._last_diff = diff
        return stop

    def __repr__(self) -> str:
        return f"SlowDown({self.rate})"


class AnyOf(Termination):
    """Stop when any of the given tasks fires."""

    def __init__(self, *tasks: Task) -> None:
        if not tasks:
            raise ValueError("AnyOf needs at least one task.")
        self.tasks = tasks
        gens = [t.max_gen for t in tasks if isinstance(t, Termination) and t.max_gen is not None]
        self.max_gen = min(gens) if gens else None

    def reset(self) -> None:
        for t in self.tasks:
            if isinstance(t, Termination):
                t.reset()

    def __call__(self, ctx: "Ctx") -> bool:
        # Every task is evaluated so stateful ones keep tracking.
        results = [bool(t(ctx)) for t in self.tasks]
        return any(results)

    def __repr__(self) -> str:
        return "AnyOf(" + ", ".join(repr(t) for t in self.tasks) + ")"


def max_gen(n: int) -> MaxGen:
    return MaxGen(n)


def min_fit(value: float) -> MinFit:
    return MinFit(value)


def max_time(seconds: float) -> MaxTime:
    return MaxTime(seconds)


def slow_down(rate: float) -> SlowDown:
    return SlowDown(rate)


def any_of(*tasks: Task) -> AnyOf:
    return AnyOf(*tasks)


def max_gen_of(task: Any) -> int | None:
    """Generation budget declared by ``task``, if any."""
    if isinstance(task, Termination):
        return task.max_gen
    return None


__all__ = [
    "AnyOf",
    "MaxGen",
    "MaxTime",
    "MinFit",
    "SlowDown",
    "Task",
    "Termination",
    "any_of",
    "max_gen",
    "max_gen_of",
    "max_time",
    "min_fit",
    "slow_down",
]
