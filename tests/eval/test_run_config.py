# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
import pytest
from omegaconf import OmegaConf

from palace_eval.config import DEFAULT_CHECKPOINTS, RunConfig, load_run_config
from palace_mem.errors import ConfigurationError, InsufficientSampleError


def test_defaults() -> None:
    cfg = load_run_config({})
    assert cfg == RunConfig(checkpoints=DEFAULT_CHECKPOINTS)
    assert cfg.algorithms == ("fibonacci", "exponential")
    assert cfg.interval_table("exponential").offsets[-1] == 480


def test_from_hydra_config() -> None:
    cfg = OmegaConf.create(
        {
            "duration_days": 60,
            "sample_size": 20,
            "iterations": 7,
            "checkpoints": [60, 30],
            "seed": 3,
            "algorithms": {"candidate": "weekly", "baseline": "fibonacci"},
            "tables": {"weekly": [1, 7, 14, 28]},
            "initial_strength": {"low": 0.3, "high": 0.6},
            "max_trials": 5,
            "deadline_s": 2.5,
            "run_id": "ignored",
        }
    )
    run_cfg = load_run_config(cfg)
    assert run_cfg.checkpoints == (30, 60)
    assert run_cfg.candidate == "weekly"
    assert run_cfg.interval_table("weekly").offsets == (1, 7, 14, 28)
    assert run_cfg.strength_range == (0.3, 0.6)
    assert (run_cfg.max_trials, run_cfg.deadline_s) == (5, 2.5)
    data = run_cfg.to_dict()
    assert data["tables"] == {"weekly": [1, 7, 14, 28]}
    assert data["checkpoints"] == [30, 60]


def test_zero_sample_is_insufficient() -> None:
    with pytest.raises(InsufficientSampleError):
        load_run_config({"sample_size": 0})
    # validation can be deferred
    assert load_run_config({"sample_size": 0}, validate=False).sample_size == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"sample_size": -5},
        {"iterations": 0},
        {"duration_days": 0},
        {"duration_days": "ninety"},
        {"checkpoints": []},
        {"checkpoints": [30, 120]},
        {"algorithms": {"candidate": "exponential"}},
        {"algorithms": {"candidate": "lunar"}},
        {"tables": {"weekly": [1, "x"]}},
        {"tables": {"weekly": [7, 1]}, "algorithms": {"candidate": "weekly"}},
        {"initial_strength": {"low": 0.9, "high": 0.2}},
        {"max_trials": 0},
        {"deadline_s": -1},
        {"seed": -1},
    ],
)
def test_invalid_settings(overrides) -> None:
    with pytest.raises(ConfigurationError):
        load_run_config(OmegaConf.create(overrides))


@pytest.mark.parametrize("seed", [-1, "7", True, 2.5])
def test_seed_must_be_non_negative_int(seed) -> None:
    with pytest.raises(ConfigurationError) as exc:
        RunConfig(seed=seed).validate()
    assert "seed" in str(exc.value)
