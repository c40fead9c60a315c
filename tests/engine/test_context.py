import math

import numpy as np
import pytest

from metanature.engine.context import Ctx
from metanature.foundation.fitness import MultiObjective, Product
from metanature.foundation.pareto import Pareto, SingleBest
from metanature.foundation.problem import Fx, WeightedSphere
from metanature.foundation.random import Rng


def _ctx():
    func = WeightedSphere()
    pool = np.array([[1.0, 1.0, 1.0, 1.0], [0.0, 0.0, 0.0, 1.0], [2.0, 0.0, 0.0, 0.0]])
    return Ctx.from_pool(func, pool)


def test_shape_and_bound_accessors():
    ctx = _ctx()
    assert ctx.pop_num() == 3
    assert ctx.dim() == 4
    assert ctx.bound_of(2) == (0.0, 50.0)
    assert ctx.lb(0) == 0.0
    assert ctx.ub(3) == 50.0
    assert ctx.bound_width(1) == 50.0
    assert ctx.bound_range(1) == (0.0, 50.0)
    assert len(ctx.bound()) == 4


def test_from_pool_establishes_best():
    ctx = _ctx()
    assert isinstance(ctx.best, SingleBest)
    assert ctx.best_eval() == 1.0
    np.testing.assert_array_equal(ctx.as_best_xs(), [0.0, 0.0, 0.0, 1.0])
    assert ctx.gen == 0


def test_clamp_never_raises():
    ctx = _ctx()
    assert ctx.clamp(0, -3.0) == 0.0
    assert ctx.clamp(0, 70.0) == 50.0
    assert ctx.clamp(0, 12.5) == 12.5
    np.testing.assert_array_equal(ctx.clip(np.array([-1.0, 60.0, 5.0, 0.0])), [0.0, 50.0, 5.0, 0.0])


def test_assign_from_and_find_best_monotonic():
    ctx = _ctx()
    ctx.assign_from(0, np.zeros(4), 0.0)
    ctx.find_best()
    assert ctx.best_eval() == 0.0
    ctx.assign_from(0, np.full(4, 10.0), 1100.0)
    ctx.find_best()
    assert ctx.best_eval() == 0.0


def test_assign_from_best_copies():
    ctx = _ctx()
    ctx.assign_from_best(2)
    np.testing.assert_array_equal(ctx.pool[2], ctx.as_best_xs())
    assert ctx.pool_f[2] == ctx.as_best_fitness()
    ctx.pool[2, 0] = 42.0
    assert ctx.as_best_xs()[0] == 0.0


def test_evaluate_keeps_order():
    ctx = _ctx()
    rows = np.array([[0.0, 1.0, 0.0, 0.0], [1.0, 0.0, 0.0, 0.0]])
    assert ctx.evaluate(rows) == [8.0, 1.0]
    assert ctx.evaluate(np.empty((0, 4))) == []


def test_random_xs_in_bounds():
    ctx = _ctx()
    rng = Rng(0)
    for _ in range(20):
        assert ctx.in_bounds(ctx.random_xs(rng))


def test_multi_objective_uses_pareto():
    func = Fx([[0.0, 1.0]] * 2, lambda x: MultiObjective([x[0], 1.0 - x[0] + x[1]]))
    ctx = Ctx.from_pool(func, np.array([[0.1, 0.0], [0.9, 0.0], [0.5, 0.5]]), pareto_limit=10)
    assert isinstance(ctx.best, Pareto)
    assert ctx.best.limit == 10
    assert len(ctx.best) == 2


def test_prune_fitness_drops_products_but_not_best():
    func = Fx([[0.0, 1.0]], lambda x: Product(float(x[0]), f"design-{x[0]:.2f}"))
    ctx = Ctx.from_pool(func, np.array([[0.5], [0.25]]))
    assert all(not f.has_product() for f in ctx.pool_f)
    assert ctx.as_best_fitness().product == "design-0.25"


def test_invalid_fitness_does_not_become_best_when_valid_exists():
    func = Fx([[0.0, 1.0]], lambda x: math.nan if x[0] > 0.5 else float(x[0]))
    ctx = Ctx.from_pool(func, np.array([[0.9], [0.3]]))
    assert ctx.best_eval() == 0.3


def test_empty_pool_needs_explicit_best():
    with pytest.raises(ValueError):
        Ctx(WeightedSphere(), np.empty((0, 4)), [])
