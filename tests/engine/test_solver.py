import logging
import math

import numpy as np
import pytest

from metanature import (
    DEConfig,
    FuncPool,
    GaussianPool,
    LatinHypercubePool,
    ReadyPool,
    RGAConfig,
    Solver,
    UniformBy,
    max_gen,
)
from metanature.engine.algorithm.de import DE
from metanature.foundation.exceptions import (
    BoundsError,
    ConfigurationError,
    InvalidAlgorithmError,
    InvalidEngineError,
    MissingConfigError,
    PoolShapeError,
    PopulationSizeError,
    ProblemDimensionError,
    SeedError,
)
from metanature.foundation.fitness import MultiObjective, Product
from metanature.foundation.problem import ZDT1, Fx, ObjFunc, WeightedSphere


def _short(builder, gens=5):
    return builder.seed(0).task(max_gen(gens))


class TestConfigurationErrors:
    def test_ready_pool_row_length_mismatch(self):
        calls = []
        pool = [[1.0, 2.0, 3.0]] * 10
        builder = (
            Solver.build(DEConfig().fixed(), WeightedSphere())
            .pop_num(10)
            .init_pool(ReadyPool(pool, [1.0] * 10))
            .callback(lambda ctx: calls.append(ctx.gen))
        )
        with pytest.raises(PoolShapeError):
            builder.solve()
        assert calls == []

    def test_ready_pool_fitness_length_mismatch(self):
        pool = [[1.0, 2.0, 3.0, 4.0]] * 10
        with pytest.raises(PoolShapeError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).init_pool(ReadyPool(pool, [1.0] * 9)).solve()

    def test_ready_pool_count_mismatch_with_explicit_pop_num(self):
        pool = [[1.0, 2.0, 3.0, 4.0]] * 10
        with pytest.raises(PoolShapeError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(12).init_pool(ReadyPool(pool, [1.0] * 10)).solve()

    def test_zero_dimension(self):
        with pytest.raises(ProblemDimensionError):
            Solver.build(DEConfig().fixed(), Fx([], lambda x: 0.0)).solve()

    def test_lower_above_upper(self):
        with pytest.raises(BoundsError):
            Solver.build(DEConfig().fixed(), Fx([[1.0, 0.0]], lambda x: 0.0)).solve()

    @pytest.mark.parametrize("pop_num", [0, -3, 2.5])
    def test_bad_pop_num(self, pop_num):
        with pytest.raises(PopulationSizeError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(pop_num).solve()

    def test_bad_seed(self):
        with pytest.raises(SeedError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10).seed(-1).solve()

    def test_gaussian_shape(self):
        with pytest.raises(PoolShapeError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).init_pool(GaussianPool([0.0] * 3, [1.0] * 3)).solve()

    def test_unknown_backend(self):
        with pytest.raises(InvalidEngineError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10).eval_backend("gpu").solve()

    def test_unknown_algorithm_name(self):
        with pytest.raises(InvalidAlgorithmError, match="Did you mean 'pso'"):
            Solver.build_boxed("psoo", WeightedSphere())

    def test_mapping_needs_algorithm_key(self):
        with pytest.raises(MissingConfigError):
            Solver.build_boxed({"f": 0.5}, WeightedSphere())

    def test_init_pool_requires_policy(self):
        with pytest.raises(ConfigurationError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).init_pool([[0.0] * 4])

    def test_pareto_limit_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            Solver.build(DEConfig().fixed(), WeightedSphere()).pareto_limit(0)


class TestSolveLoop:
    def test_default_generations(self):
        s = Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10).seed(1).solve()
        assert s.gen() == 200
        assert s.dim() == 4

    def test_default_population_comes_from_config(self):
        s = _short(Solver.build(RGAConfig().fixed(), WeightedSphere()), gens=1).solve()
        assert s.pop_num() == 500

    def test_algorithm_instance_uses_default_pop(self):
        s = _short(Solver.build(DE(), WeightedSphere())).solve()
        assert s.pop_num() == 200

    def test_callback_sees_generation_counter(self):
        seen = []
        _short(Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10), gens=3).callback(
            lambda ctx: seen.append((ctx.gen, ctx.pop_num(), ctx.dim()))
        ).solve()
        assert seen == [(0, 10, 4), (1, 10, 4), (2, 10, 4), (3, 10, 4)]

    def test_custom_task(self):
        s = Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10).seed(0).task(lambda ctx: ctx.gen == 7).solve()
        assert s.gen() == 7

    def test_seed_is_reported(self):
        s = _short(Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10)).solve()
        assert s.seed() == 0
        unseeded = Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10).task(max_gen(1)).solve()
        assert 0 <= unseeded.seed() < 2**128

    def test_build_boxed_by_name_and_mapping(self):
        by_name = _short(Solver.build_boxed("de", WeightedSphere()).pop_num(10)).solve()
        by_map = _short(Solver.build_boxed({"algorithm": "DE", "strategy": "s1"}, WeightedSphere()).pop_num(10)).solve()
        np.testing.assert_array_equal(by_name.best_parameters(), by_map.best_parameters())

    def test_ready_pool_pop_num_from_pool(self):
        rng = np.random.default_rng(0)
        func = WeightedSphere()
        pool = rng.uniform(0.0, 50.0, (15, 4))
        pool_f = [func.fitness(xs) for xs in pool]
        s = _short(Solver.build(DEConfig().fixed(), func).init_pool(ReadyPool(pool, pool_f)), gens=0).solve()
        assert s.pop_num() == 15
        assert s.best_fitness() == min(pool_f)

    def test_sorted_ready_pool_installs_first_as_best(self):
        func = WeightedSphere()
        pool = [[0.0, 0.0, 0.0, 1.0], [0.0, 0.0, 0.0, 2.0], [0.0, 0.0, 0.0, 3.0]]
        pool_f = [1.0, 4.0, 9.0]
        s = _short(Solver.build(DEConfig().fixed(), func).init_pool(ReadyPool(pool, pool_f, sorted=True)), gens=0).solve()
        np.testing.assert_array_equal(s.best_parameters(), [0.0, 0.0, 0.0, 1.0])

    @pytest.mark.parametrize(
        "policy",
        [
            LatinHypercubePool(),
            GaussianPool([25.0] * 4, [5.0] * 4),
            UniformBy(lambda xs: xs[0] > 25.0),
            FuncPool(lambda s, rng_range, rng: rng_range[0]),
        ],
    )
    def test_pool_policies_stay_in_bounds(self, policy):
        first = []
        _short(Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(12).init_pool(policy), gens=0).callback(
            lambda ctx: first.append(ctx.pool.copy())
        ).solve()
        pool = first[0]
        assert pool.shape == (12, 4)
        assert np.all(pool >= 0.0) and np.all(pool <= 50.0)
        if isinstance(policy, UniformBy):
            assert np.all(pool[:, 0] > 25.0)

    def test_latin_hypercube_one_per_stratum(self):
        first = []
        _short(Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10).init_pool(LatinHypercubePool()), gens=0).callback(
            lambda ctx: first.append(ctx.pool.copy())
        ).solve()
        strata = np.floor(first[0] / 5.0).astype(int)
        for j in range(4):
            assert sorted(strata[:, j].tolist()) == list(range(10))

    def test_result_returns_product(self):
        func = Fx([[0.0, 1.0]] * 2, lambda x: Product(float(np.sum(x)), f"{x[0]:.3f}/{x[1]:.3f}"))
        s = _short(Solver.build(DEConfig().fixed(), func).pop_num(10), gens=10).solve()
        best = s.best_parameters()
        assert s.result() == f"{best[0]:.3f}/{best[1]:.3f}"
        assert all(not f.has_product() for f in s.ctx().pool_f)

    def test_result_without_product_is_fitness(self):
        s = _short(Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10)).solve()
        assert s.result() == s.best_fitness()
        front = s.pareto_front()
        assert len(front) == 1
        np.testing.assert_array_equal(front[0][0], s.best_parameters())


class TestMultiObjective:
    def test_pareto_front_limit_and_non_dominance(self):
        s = _short(Solver.build(DEConfig().fixed(), ZDT1(n_var=6)).pop_num(30).pareto_limit(8), gens=20).solve()
        front = s.pareto_front()
        assert 1 <= len(front) <= 8
        for i, (_, a) in enumerate(front):
            for j, (_, b) in enumerate(front):
                if i != j:
                    assert not a.is_dominated(b)
        assert isinstance(s.best_fitness(), MultiObjective)
        assert s.best_eval() == min(f.eval() for _, f in front)

    def test_front_non_dominated_every_generation(self):
        def check(ctx):
            front = ctx.best.front()
            for i, (_, a) in enumerate(front):
                for j, (_, b) in enumerate(front):
                    assert i == j or not a.is_dominated(b)

        _short(Solver.build(DEConfig().fixed(), ZDT1(n_var=4)).pop_num(20), gens=10).callback(check).solve()


class Flaky(ObjFunc):
    """Returns NaN on a band of the first variable."""

    def bound(self):
        return [(0.0, 1.0)] * 2

    def fitness(self, xs):
        if 0.4 < xs[0] < 0.6:
            return math.nan
        return float(xs[0] ** 2 + xs[1] ** 2)


class TestRegeneration:
    def test_invalid_individuals_are_resampled(self):
        counts = []
        s = (
            Solver.build(DEConfig().fixed(), Flaky())
            .pop_num(30)
            .seed(2)
            .task(max_gen(5))
            .regenerate(True)
            .callback(lambda ctx: counts.append(sum(1 for f in ctx.pool_f if f != f)))
            .solve()
        )
        assert counts[0] > 0
        assert counts[-1] < counts[0]
        assert s.best_fitness() == s.best_fitness()

    def test_invalid_fitness_never_best(self):
        func = Fx([[0.0, 1.0]], lambda x: math.nan if x[0] < 0.5 else float(x[0]))
        s = _short(Solver.build(DEConfig().fixed(), func).pop_num(20), gens=10).solve()
        assert not math.isnan(s.best_fitness())
        assert s.best_parameters()[0] >= 0.5


class TestLogging:
    def test_info_summary_and_debug_seed(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="metanature"):
            _short(Solver.build(DEConfig().fixed(), WeightedSphere()).pop_num(10)).solve()
        messages = [r.getMessage() for r in caplog.records]
        assert any("seed=0" in m and "pop_num=10" in m for m in messages)
        assert any(m.startswith("DE finished: 5 generations") for m in messages)
