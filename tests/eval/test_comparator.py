"""Trial batches comparing two interval tables."""

import itertools
import json

import numpy as np
import pytest

from palace_eval import comparator
from palace_eval.comparator import SCHEMA_VERSION, compare_algorithms, run_trial
from palace_eval.config import RunConfig
from palace_eval.decision import NO_SIGNIFICANT_DIFFERENCE
from palace_mem.errors import ConfigurationError, InsufficientSampleError, RangeViolationError
from palace_mem.spacing.intervals import FIBONACCI_OFFSETS


def small_config(**overrides) -> RunConfig:
    params = dict(
        duration_days=30, sample_size=10, iterations=3, checkpoints=(10, 20, 30), seed=7
    )
    params.update(overrides)
    return RunConfig(**params)


def _stable(doc):
    doc = dict(doc)
    doc.pop("timestamp")
    doc.pop("elapsed_s")
    return doc


def test_zero_sample_raises_before_running() -> None:
    with pytest.raises(InsufficientSampleError):
        compare_algorithms(small_config(sample_size=0))


@pytest.mark.parametrize(
    "overrides",
    [
        {"sample_size": -1},
        {"duration_days": 0},
        {"checkpoints": ()},
        {"baseline": "fibonacci"},
        {"seed": -1},
    ],
)
def test_invalid_config_rejected(overrides) -> None:
    with pytest.raises(ConfigurationError):
        compare_algorithms(small_config(**overrides))


def test_same_seed_reproduces_results() -> None:
    a = compare_algorithms(small_config())
    b = compare_algorithms(small_config())
    assert _stable(a.to_dict()) == _stable(b.to_dict())
    assert a.trial_rows() == b.trial_rows()


def test_run_trial_is_repeatable() -> None:
    seq = np.random.SeedSequence(99).spawn(1)[0]
    first = run_trial(small_config(), 0, seq)
    second = run_trial(small_config(), 0, seq)
    assert first.rows() == second.rows()


def test_trials_are_paired() -> None:
    """Two identical tables under different names see identical trials."""

    cfg = small_config(baseline="fib_copy", tables={"fib_copy": FIBONACCI_OFFSETS})
    batch = compare_algorithms(cfg)
    for outcome in batch.outcomes:
        assert outcome.stats["fibonacci"] == outcome.stats["fib_copy"]
        assert outcome.total_reviews["fibonacci"] == outcome.total_reviews["fib_copy"]
    welch = batch.significance()
    assert welch.t == 0.0
    assert batch.decision().verdict == NO_SIGNIFICANT_DIFFERENCE


def test_result_document() -> None:
    doc = compare_algorithms(small_config()).to_dict()
    assert doc["schema_version"] == SCHEMA_VERSION == 1
    assert list(doc["checkpoints"]) == ["10", "20", "30"]
    assert doc["statistics"]["checkpoint"] == 30
    assert doc["trials"] == {
        "requested": 3,
        "succeeded": 3,
        "failed": 0,
        "truncated": False,
        "failures": [],
    }
    for alg in ("fibonacci", "exponential"):
        stats = doc["statistics"][alg]
        assert stats["n"] == 3
        assert 0.0 <= stats["min"] and stats["max"] <= 100.0
        reviews = [doc["checkpoints"][d][alg]["mean_reviews"] for d in ("10", "20", "30")]
        assert reviews == sorted(reviews)
        assert doc["checkpoints"]["30"][alg]["sample_size"] == 10
    assert doc["significant"] == doc["statistics"]["welch"]["significant"]
    assert doc["decision"]["verdict"]
    # serialisable without numpy types
    json.dumps(doc)


def test_failed_trial_recorded(monkeypatch) -> None:
    real = comparator.run_trial

    def flaky(config, trial, seed_seq, palace=None):
        if trial == 1:
            raise RangeViolationError("decay outside [0, 1]", day=7)
        return real(config, trial, seed_seq, palace)

    monkeypatch.setattr(comparator, "run_trial", flaky)
    batch = compare_algorithms(small_config())
    assert [o.trial for o in batch.outcomes] == [0, 2]
    assert len(batch.failures) == 1
    failure = batch.failures[0].to_dict()
    assert failure == {
        "trial": 1,
        "kind": "RangeViolationError",
        "message": "decay outside [0, 1]",
        "day": 7,
        "checkpoint": None,
    }
    assert batch.to_dict()["trials"]["failed"] == 1


def test_all_trials_failing_has_no_statistics() -> None:
    batch = compare_algorithms(small_config(), palace={"name": "empty", "loci": []})
    assert batch.outcomes == []
    assert len(batch.failures) == 3
    assert batch.failures[0].kind == "InsufficientSampleError"
    assert batch.failures[0].checkpoint == 10
    with pytest.raises(InsufficientSampleError):
        batch.to_dict()


def test_palace_population() -> None:
    palace = {
        "loci": [
            {"memories": [{"id": f"m{i}", "confidence": 1 + i % 5} for i in range(6)]}
        ]
    }
    batch = compare_algorithms(small_config(sample_size=4), palace=palace)
    summary = batch.checkpoint_summary()
    assert summary[30]["fibonacci"].sample_size == 4


def test_max_trials_truncates() -> None:
    batch = compare_algorithms(small_config(iterations=4, max_trials=2))
    assert len(batch.outcomes) == 2
    assert batch.truncated
    assert batch.trial_summary()["requested"] == 4


def test_deadline_stops_between_trials() -> None:
    ticks = itertools.count(0.0, 3.0)
    batch = compare_algorithms(
        small_config(iterations=5, deadline_s=5.0), clock=lambda: next(ticks)
    )
    assert len(batch.outcomes) == 1
    assert batch.truncated
    assert batch.elapsed_s == 9.0


def test_malformed_palace_rejected_before_trials(monkeypatch) -> None:
    def never(*args, **kwargs):  # pragma: no cover - must not run
        raise AssertionError("trial started")

    monkeypatch.setattr(comparator, "run_trial", never)
    palace = {"loci": [{"memories": [{"id": "a", "confidence": "high"}]}]}
    with pytest.raises(ConfigurationError) as exc:
        compare_algorithms(small_config(), palace=palace)
    assert "'a'" in str(exc.value)


def test_trial_rows_carry_review_success_rate() -> None:
    batch = compare_algorithms(small_config())
    rows = batch.trial_rows()
    assert len(rows) == 3 * 2 * 3
    for row in rows:
        outcome = batch.outcomes[row["trial"]]
        assert row["success_rate"] == round(outcome.success_rate[row["algorithm"]], 3)
        assert 0.0 <= row["success_rate"] <= 1.0
