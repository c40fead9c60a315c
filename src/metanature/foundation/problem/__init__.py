from .base import BoundLike, Fx, ObjFunc, bound_array
from .benchmarks import Rastrigin, WeightedSphere, ZDT1

__all__ = ["BoundLike", "Fx", "ObjFunc", "Rastrigin", "WeightedSphere", "ZDT1", "bound_array"]
