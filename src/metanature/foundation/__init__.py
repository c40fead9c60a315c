"""Building blocks shared by every strategy: randomness, fitness, objectives, evaluation."""

from .fitness import Fitness, MultiObjective, Product
from .pareto import Best, Pareto, SingleBest
from .problem import Fx, ObjFunc
from .random import Rng

__all__ = ["Best", "Fitness", "Fx", "MultiObjective", "ObjFunc", "Pareto", "Product", "Rng", "SingleBest"]
