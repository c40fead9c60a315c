import numpy as np
import pytest

from metanature import DEConfig, Solver, max_gen
from metanature.engine.algorithm.de import DE, Strategy
from metanature.engine.context import Ctx
from metanature.foundation.exceptions import InvalidStrategyError, PopulationSizeError
from metanature.foundation.problem import Fx, WeightedSphere
from metanature.foundation.random import Rng


def test_strategy_parse():
    assert Strategy.parse("S3") is Strategy.S3
    assert Strategy.parse(7) is Strategy.S7
    assert Strategy.parse(Strategy.S10) is Strategy.S10
    assert Strategy.S4.formula == 4 and Strategy.S4.crossover == "c1"
    assert Strategy.S9.formula == 4 and Strategy.S9.crossover == "c2"
    with pytest.raises(InvalidStrategyError):
        Strategy.parse("s11")
    with pytest.raises(InvalidStrategyError):
        Strategy.parse(0)


@pytest.mark.parametrize(
    "strategy, minimum",
    [("s1", 3), ("s2", 4), ("s3", 3), ("s4", 5), ("s5", 6), ("s6", 3), ("s10", 6)],
)
def test_min_pop_num_per_formula(strategy, minimum):
    assert DE(strategy=strategy).min_pop_num == minimum


def test_too_small_population_is_a_configuration_error():
    cfg = DEConfig().strategy("s5").fixed()
    with pytest.raises(PopulationSizeError):
        Solver.build(cfg, WeightedSphere()).pop_num(5).solve()


def test_out_of_bounds_trials_leave_individual_unchanged():
    # Every donor built from a narrow box lands outside it when F is huge.
    func = Fx([[0.0, 1.0]] * 3, lambda x: float(np.sum(x)))
    rng = Rng(0)
    pool = np.array([[0.1, 0.2, 0.3], [0.9, 0.8, 0.7], [0.5, 0.5, 0.5], [0.0, 1.0, 0.0], [0.3, 0.6, 0.9]])
    ctx = Ctx.from_pool(func, pool)
    before = ctx.pool.copy()
    before_f = list(ctx.pool_f)
    de = DE(strategy="s2", f=1000.0, cross=1.0)
    de.generation(ctx, rng)
    np.testing.assert_array_equal(ctx.pool, before)
    assert ctx.pool_f == before_f


def test_replacement_only_when_trial_dominates():
    func = WeightedSphere()
    rng = Rng(1)
    ctx = Ctx.from_pool(func, rng.range(0.0, 50.0, (12, 4)))
    before_f = list(ctx.pool_f)
    de = DE()
    for _ in range(5):
        de.generation(ctx, rng)
    assert all(after <= prev for after, prev in zip(ctx.pool_f, before_f))
    assert all(ctx.in_bounds(xs) for xs in ctx.pool)
    for xs, f in zip(ctx.pool, ctx.pool_f):
        assert f == func.fitness(xs)


@pytest.mark.parametrize("strategy", [f"s{i}" for i in range(1, 11)])
def test_every_strategy_improves_and_stays_in_bounds(strategy):
    func = WeightedSphere()
    history = []
    s = (
        Solver.build(DEConfig().strategy(strategy).fixed(), func)
        .pop_num(20)
        .seed(3)
        .task(max_gen(30))
        .callback(lambda ctx: history.append(ctx.best_eval()))
        .solve()
    )
    assert s.gen() == 30
    assert np.all(s.best_parameters() >= 0.0) and np.all(s.best_parameters() <= 50.0)
    assert s.best_fitness() == func.fitness(s.best_parameters())
    assert s.best_fitness() < history[0]


def test_weighted_sphere_converges():
    history = []
    func = Fx([[0.0, 50.0]] * 4, lambda x: x[0] ** 2 + 8 * x[1] ** 2 + x[2] ** 2 + x[3] ** 2)
    s = (
        Solver.build(DEConfig().fixed(), func)
        .pop_num(40)
        .seed(0)
        .task(max_gen(200))
        .callback(lambda ctx: history.append(ctx.best_eval()))
        .solve()
    )
    assert s.gen() == 200
    assert len(history) == 201
    assert all(b <= a for a, b in zip(history, history[1:]))
    assert s.best_fitness() < 1e-6
    assert np.all(np.abs(s.best_parameters()) < 1e-3)
