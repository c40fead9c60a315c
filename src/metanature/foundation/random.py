"""
Shared random number generator.

A single :class:`Rng` is created per solve. Its state is numpy's 128-bit
``PCG64`` generator guarded by a lock, so worker threads may draw from the same
instance. Concurrent draws are valid and advancing, but their interleaving is
not reproducible; a fixed seed only pins the sequence seen by one thread.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, MutableSequence, Sequence
from typing import Any, TypeVar

import numpy as np

from metanature.foundation.exceptions import SeedError

R = TypeVar("R")

SEED_BITS = 128
_SEED_LIMIT = 1 << SEED_BITS


def _resolve_sequence(seed: int | None) -> np.random.SeedSequence:
    if seed is None:
        # SeedSequence draws 128 bits of OS entropy by default.
        return np.random.SeedSequence()
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise SeedError(seed)
    seed = int(seed)
    if not 0 <= seed < _SEED_LIMIT:
        raise SeedError(seed)
    return np.random.SeedSequence(seed)


class Rng:
    """Uniform and Gaussian sampler with a resolvable fixed seed.

    Parameters
    ----------
    seed : int, optional
        Integer in ``[0, 2**128)``. When omitted, the seed is drawn from the OS
        and can be read back from :attr:`seed` to reproduce the run.
    """

    def __init__(self, seed: int | None = None) -> None:
        seq = _resolve_sequence(seed)
        self._init_from(seq, int(seq.entropy))

    def _init_from(self, seq: np.random.SeedSequence, seed: int) -> None:
        self._seq = seq
        self._seed = seed
        self._gen = np.random.Generator(np.random.PCG64(seq))
        self._lock = threading.Lock()

    @classmethod
    def _child(cls, seq: np.random.SeedSequence, seed: int) -> "Rng":
        rng = cls.__new__(cls)
        rng._init_from(seq, seed)
        return rng

    @property
    def seed(self) -> int:
        """The resolved seed of this generator (the root seed for spawned children)."""
        return self._seed

    def __repr__(self) -> str:
        return f"Rng(seed={self._seed})"

    # ------------------------------------------------------------------
    # Low-level access
    # ------------------------------------------------------------------

    def gen(self, f: Callable[[np.random.Generator], R]) -> R:
        """Run ``f`` with exclusive access to the underlying numpy generator."""
        with self._lock:
            return f(self._gen)

    def spawn(self, n: int) -> list["Rng"]:
        """Create ``n`` independent sub-streams, e.g. one per worker."""
        with self._lock:
            children = self._seq.spawn(int(n))
        return [Rng._child(child, self._seed) for child in children]

    # ------------------------------------------------------------------
    # Scalar and vector draws
    # ------------------------------------------------------------------

    def rand(self, size: int | tuple[int, ...] | None = None) -> Any:
        """Uniform value(s) in ``[0, 1)``."""
        with self._lock:
            if size is None:
                return float(self._gen.random())
            return self._gen.random(size)

    def range(self, a: float, b: float, size: int | tuple[int, ...] | None = None) -> Any:
        """Uniform value(s) in ``[a, b)``."""
        with self._lock:
            if size is None:
                return float(self._gen.uniform(a, b))
            return self._gen.uniform(a, b, size)

    def int_range(self, a: int, b: int) -> int:
        """Uniform integer in ``[a, b)``."""
        with self._lock:
            return int(self._gen.integers(a, b))

    def ub(self, b: Any) -> Any:
        """Uniform value in ``[0, b)``; integer when ``b`` is an integer."""
        if isinstance(b, (int, np.integer)) and not isinstance(b, bool):
            return self.int_range(0, int(b))
        return self.range(0.0, float(b))

    def maybe(self, p: float) -> bool:
        """Bernoulli draw, ``True`` with probability ``p``."""
        return self.rand() < p

    def gaussian(self, mean: Any, std: Any, size: int | tuple[int, ...] | None = None) -> Any:
        """Normal sample(s) (numpy's ziggurat sampler)."""
        with self._lock:
            if size is None and np.ndim(mean) == 0 and np.ndim(std) == 0:
                return float(self._gen.normal(mean, std))
            return self._gen.normal(mean, std, size)

    def clamp(self, v: float, a: float, b: float) -> float:
        """Return ``v`` when it lies in ``[a, b]``, otherwise a fresh uniform draw in the range."""
        if a <= v <= b:
            return v
        return self.range(a, b)

    # ------------------------------------------------------------------
    # Permutations
    # ------------------------------------------------------------------

    def shuffle(self, seq: MutableSequence[Any] | np.ndarray) -> None:
        """Shuffle ``seq`` in place."""
        with self._lock:
            self._gen.shuffle(seq)

    def fill_distinct(self, buf: MutableSequence[int], start: int, a: int, b: int) -> MutableSequence[int]:
        """Fill ``buf[start:]`` with distinct integers of ``[a, b)``.

        The drawn values are also distinct from the fixed prefix ``buf[:start]``.
        Raises ``ValueError`` when the range holds too few candidates.
        """
        need = len(buf) - start
        taken = set(buf[:start])
        available = (b - a) - sum(1 for v in taken if a <= v < b)
        if need > available:
            raise ValueError(f"cannot draw {need} distinct values from [{a}, {b}) excluding {sorted(taken)}")
        with self._lock:
            for i in range(start, len(buf)):
                v = int(self._gen.integers(a, b))
                while v in taken:
                    v = int(self._gen.integers(a, b))
                taken.add(v)
                buf[i] = v
        return buf

    def distinct(self, n: int, a: int, b: int, exclude: Sequence[int] = ()) -> list[int]:
        """Draw ``n`` distinct integers of ``[a, b)`` not in ``exclude``."""
        buf = list(exclude) + [0] * n
        self.fill_distinct(buf, len(exclude), a, b)
        return buf[len(exclude) :]


__all__ = ["Rng", "SEED_BITS"]
