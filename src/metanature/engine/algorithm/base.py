"""
Strategy contract driven by the solver loop.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metanature.engine.context import Ctx
    from metanature.foundation.random import Rng


class Algorithm(ABC):
    """Base class for meta-heuristic strategies.

    The solver calls :meth:`init` exactly once after the first pool is evaluated,
    then :meth:`generation` once per generation. A strategy may keep private
    scratch buffers between calls but all shared state lives in the context.
    """

    #: Registry name, also used in log and error messages.
    name: str = "algorithm"

    #: Smallest population this strategy can run with.
    min_pop_num: int = 1

    def init(self, ctx: "Ctx", rng: "Rng") -> None:
        return None

    @abstractmethod
    def generation(self, ctx: "Ctx", rng: "Rng") -> None:
        """Advance the population by one generation."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["Algorithm"]
