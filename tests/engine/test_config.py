import json

import pytest

from metanature.engine.algorithm import DE, FA, PSO, RGA, TLBO, available_algorithms
from metanature.engine.algorithm.config import DEConfig, FAConfig, PSOConfig, RGAConfig, TLBOConfig
from metanature.engine.algorithm.registry import config_from_mapping, resolve_config
from metanature.foundation.exceptions import (
    ConfigurationError,
    InvalidAlgorithmError,
    InvalidStrategyError,
    MissingConfigError,
)


def test_de_builder_roundtrip():
    cfg = DEConfig().strategy("S6").f(0.5).cross(0.8).fixed()
    assert cfg.to_dict() == {"strategy": "s6", "f": 0.5, "cross": 0.8}
    assert json.loads(cfg.to_json()) == cfg.to_dict()
    algo = cfg.algorithm()
    assert isinstance(algo, DE)
    assert algo.f == 0.5 and algo.cross == 0.8
    assert algo.strategy.value == "s6"


def test_de_from_dict_matches_builder():
    assert DEConfig.from_dict({"strategy": 2, "f": 0.7}) == DEConfig().strategy("s2").f(0.7).fixed()


def test_configs_are_frozen():
    cfg = PSOConfig.default()
    with pytest.raises(AttributeError):
        cfg.social = 1.0


@pytest.mark.parametrize(
    "builder, expected_pop, algo_type",
    [
        (DEConfig, 400, DE),
        (FAConfig, 80, FA),
        (PSOConfig, 200, PSO),
        (RGAConfig, 500, RGA),
        (TLBOConfig, 200, TLBO),
    ],
)
def test_defaults(builder, expected_pop, algo_type):
    cfg = builder.default()
    assert cfg.default_pop_num() == expected_pop
    assert isinstance(cfg.algorithm(), algo_type)


def test_each_algorithm_call_returns_fresh_instance():
    cfg = FAConfig().alpha(2.0).fixed()
    a, b = cfg.algorithm(), cfg.algorithm()
    assert a is not b
    assert a.alpha == 2.0


@pytest.mark.parametrize(
    "make",
    [
        lambda: DEConfig().cross(1.5).fixed(),
        lambda: DEConfig().f(-0.1).fixed(),
        lambda: RGAConfig().mutate(-0.2).fixed(),
        lambda: RGAConfig().delta(-1).fixed(),
        lambda: PSOConfig().velocity(-1.0).fixed(),
        lambda: FAConfig().gamma(-0.5).fixed(),
    ],
)
def test_invalid_values_raise_configuration_error(make):
    with pytest.raises(ConfigurationError):
        make()


def test_invalid_strategy():
    with pytest.raises(InvalidStrategyError):
        DEConfig().strategy("s42")
    with pytest.raises(InvalidStrategyError):
        DEConfig.from_dict({"strategy": True})


def test_registry_lists_every_strategy():
    assert available_algorithms() == ["de", "fa", "pso", "rga", "tlbo"]


def test_resolve_config_forms():
    assert resolve_config("RGA") == RGAConfig.default()
    assert resolve_config(DEConfig().f(0.3)) == DEConfig().f(0.3).fixed()
    frozen = TLBOConfig.default()
    assert resolve_config(frozen) is frozen
    assert config_from_mapping({"algorithm": "pso", "social": 1.0}).social == 1.0


def test_resolve_config_errors():
    with pytest.raises(MissingConfigError):
        config_from_mapping({"strategy": "s1"})
    with pytest.raises(InvalidAlgorithmError):
        resolve_config("nsga")
    with pytest.raises(InvalidAlgorithmError):
        resolve_config(42)


def test_de_scale_factor_must_be_positive():
    with pytest.raises(ConfigurationError, match="must be positive"):
        DEConfig().f(0.0).fixed()


@pytest.mark.parametrize(
    "mapping, hint",
    [
        ({"algorithm": "de", "F": 0.1}, "Did you mean 'f'"),
        ({"algorithm": "de", "crossover": 0.2}, "Did you mean 'cross'"),
        ({"algorithm": "rga", "mutation": 0.2}, "Did you mean 'mutate'"),
        ({"algorithm": "tlbo", "alpha": 1.0}, "Known TLBO settings"),
    ],
)
def test_unknown_settings_are_rejected(mapping, hint):
    with pytest.raises(ConfigurationError, match=hint):
        config_from_mapping(mapping)
