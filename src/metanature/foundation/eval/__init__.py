from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

import numpy as np


class EvaluationBackend(Protocol):
    """Protocol for population evaluation backends.

    ``map`` calls ``func.fitness`` on every row and returns the fitness values
    in input order.
    """

    name: str

    def map(self, func: Any, rows: np.ndarray | Sequence[np.ndarray]) -> list[Any]: ...

    def close(self) -> None:  # pragma: no cover - optional for pooled backends
        """Clean up any resources (executors, pools)."""
        return None


__all__ = ["EvaluationBackend"]
