import numpy as np

from metanature.foundation.fitness import MultiObjective
from metanature.foundation.problem.base import ObjFunc


class WeightedSphere(ObjFunc):
    """Sum of weighted squares; minimum 0 at the origin."""

    def __init__(self, weights=(1.0, 8.0, 1.0, 1.0), lower: float = 0.0, upper: float = 50.0) -> None:
        self.weights = np.asarray(weights, dtype=float)
        self._bound = [(float(lower), float(upper))] * self.weights.size

    def bound(self):
        return self._bound

    def fitness(self, xs: np.ndarray) -> float:
        return float(np.dot(self.weights, np.asarray(xs, dtype=float) ** 2))


class Rastrigin(ObjFunc):
    def __init__(self, n_var: int = 10) -> None:
        self.n_var = n_var
        self._bound = [(-5.12, 5.12)] * n_var

    def bound(self):
        return self._bound

    def fitness(self, xs: np.ndarray) -> float:
        x = np.asarray(xs, dtype=float)
        return float(10.0 * x.size + np.sum(x * x - 10.0 * np.cos(2.0 * np.pi * x)))


class ZDT1(ObjFunc):
    """Two-objective ZDT1 on [0, 1]^n_var; the Pareto front is f2 = 1 - sqrt(f1)."""

    def __init__(self, n_var: int = 30) -> None:
        if n_var < 2:
            raise ValueError("ZDT1 needs at least two variables.")
        self.n_var = n_var
        self._bound = [(0.0, 1.0)] * n_var

    def bound(self):
        return self._bound

    def fitness(self, xs: np.ndarray) -> MultiObjective:
        x = np.asarray(xs, dtype=float)
        f1 = x[0]
        g = 1.0 + 9.0 * np.mean(x[1:])
        f2 = g * (1.0 - np.sqrt(f1 / g))
        return MultiObjective([f1, f2])


__all__ = ["Rastrigin", "WeightedSphere", "ZDT1"]
