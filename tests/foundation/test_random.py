import numpy as np
import pytest

from metanature.foundation.exceptions import SeedError
from metanature.foundation.random import Rng


def test_fixed_seed_reproduces_sequence():
    a = Rng(42)
    b = Rng(42)
    assert [a.rand() for _ in range(5)] == [b.rand() for _ in range(5)]
    assert a.seed == b.seed == 42


def test_unseeded_resolves_a_reportable_seed():
    rng = Rng()
    assert 0 <= rng.seed < 2**128
    replay = Rng(rng.seed)
    assert rng.rand() == replay.rand()


@pytest.mark.parametrize("seed", [-1, 2**128, 1.5, "7", True])
def test_invalid_seed_rejected(seed):
    with pytest.raises(SeedError):
        Rng(seed)


def test_ranges_respect_bounds():
    rng = Rng(0)
    for _ in range(200):
        assert 0.0 <= rng.rand() < 1.0
        assert -2.0 <= rng.range(-2.0, 3.0) < 3.0
        assert 3 <= rng.int_range(3, 7) < 7
        assert 0 <= rng.ub(5) < 5
    assert isinstance(rng.ub(5), int)
    assert isinstance(rng.ub(5.0), float)


def test_maybe_extremes():
    rng = Rng(1)
    assert not any(rng.maybe(0.0) for _ in range(50))
    assert all(rng.maybe(1.0) for _ in range(50))


def test_gaussian_vector_shape():
    rng = Rng(3)
    out = rng.gaussian(np.zeros(4), np.ones(4), (10, 4))
    assert out.shape == (10, 4)
    assert isinstance(rng.gaussian(0.0, 1.0), float)


def test_clamp_keeps_inside_and_resamples_outside():
    rng = Rng(5)
    assert rng.clamp(0.5, 0.0, 1.0) == 0.5
    for _ in range(20):
        v = rng.clamp(3.0, 0.0, 1.0)
        assert 0.0 <= v < 1.0


def test_fill_distinct_excludes_prefix():
    rng = Rng(7)
    for _ in range(100):
        buf = rng.fill_distinct([2, 0, 0, 0], 1, 0, 5)
        assert buf[0] == 2
        assert len(set(buf)) == 4
        assert all(0 <= v < 5 for v in buf)


def test_fill_distinct_not_enough_candidates():
    rng = Rng(7)
    with pytest.raises(ValueError):
        rng.fill_distinct([0, 0, 0], 1, 0, 2)


def test_distinct_draw():
    rng = Rng(11)
    out = rng.distinct(3, 0, 4, exclude=[1])
    assert len(out) == 3
    assert 1 not in out
    assert len(set(out)) == 3


def test_spawn_children_are_independent_and_deterministic():
    parent_a = Rng(9)
    parent_b = Rng(9)
    kids_a = parent_a.spawn(3)
    kids_b = parent_b.spawn(3)
    draws_a = [k.rand() for k in kids_a]
    draws_b = [k.rand() for k in kids_b]
    assert draws_a == draws_b
    assert len(set(draws_a)) == 3
    assert all(k.seed == 9 for k in kids_a)


def test_shuffle_is_a_permutation():
    rng = Rng(2)
    items = list(range(10))
    rng.shuffle(items)
    assert sorted(items) == list(range(10))
