# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Monte-Carlo comparison of two interval algorithms.

Summary
-------
Runs the scheduler loop for a candidate and a baseline interval table over
many independent trials and aggregates the checkpoint snapshots. Each trial
spawns its own ``numpy.random.SeedSequence`` child from the batch seed. The
child seeds both the trial's population and the simulation stream; both
algorithms start from the same population and an identically seeded
generator so the comparison is paired.

A trial that raises a :class:`~palace_mem.errors.SimulationError` is recorded
as a :class:`TrialFailure` with its context and the batch carries on. An
optional trial budget and wall-clock deadline are checked between trials.

Example
-------
>>> from palace_eval.config import RunConfig
>>> batch = compare_algorithms(RunConfig(iterations=2, sample_size=5))
>>> sorted(batch.checkpoint_summary()[90])
['exponential', 'fibonacci']
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np

from palace_mem.errors import InsufficientSampleError, SimulationError
from palace_mem.spacing.palace import records_from_palace, validate_palace
from palace_mem.spacing.population import PopulationArena, generate_population
from palace_mem.spacing.retention import RetentionModel
from palace_mem.spacing.scheduler import CheckpointStats, SchedulerLoop

from .config import RunConfig
from .decision import Decision, decide
from .stats import Descriptive, WelchResult, describe, welch_t_test

log = logging.getLogger(__name__)

SCHEMA_VERSION = 1
PROGRESS_EVERY = 10


@dataclass
class TrialOutcome:
    """Checkpoint stats and review totals of one successful trial."""

    trial: int
    stats: Dict[str, Dict[int, CheckpointStats]]
    total_reviews: Dict[str, int]
    success_rate: Dict[str, float] = field(default_factory=dict)

    def rows(self) -> List[Dict[str, Any]]:
        """Return one flat row per algorithm and checkpoint."""

        out: List[Dict[str, Any]] = []
        for algorithm, per_day in self.stats.items():
            for day, stat in per_day.items():
                out.append(
                    {
                        "trial": self.trial,
                        "algorithm": algorithm,
                        "checkpoint": day,
                        "total_reviews": self.total_reviews[algorithm],
                        "success_rate": round(self.success_rate.get(algorithm, 0.0), 3),
                        **stat.to_dict(),
                    }
                )
        return out


@dataclass
class TrialFailure:
    """A trial aborted by a structural simulation error."""

    trial: int
    kind: str
    message: str
    day: Optional[int] = None
    checkpoint: Optional[int] = None

    @classmethod
    def from_error(cls, trial: int, exc: SimulationError) -> "TrialFailure":
        exc.with_context(trial=trial)
        return cls(
            trial=trial,
            kind=type(exc).__name__,
            message=exc.message,
            day=exc.day,
            checkpoint=exc.checkpoint,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trial": self.trial,
            "kind": self.kind,
            "message": self.message,
            "day": self.day,
            "checkpoint": self.checkpoint,
        }


@dataclass
class CheckpointAggregate:
    """Means of one algorithm's checkpoint stats across trials."""

    retention_rate: float
    mean_confidence: float
    mean_reviews: float
    sample_size: int

    def to_dict(self) -> Dict[str, float | int]:
        return {
            "retention_rate": round(self.retention_rate, 1),
            "mean_confidence": round(self.mean_confidence, 3),
            "mean_reviews": round(self.mean_reviews, 1),
            "sample_size": self.sample_size,
        }


@dataclass
class BatchResult:
    """All outcomes of a trial batch plus derived statistics."""

    config: RunConfig
    outcomes: List[TrialOutcome]
    failures: List[TrialFailure]
    truncated: bool = False
    elapsed_s: float = 0.0
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    # ------------------------------------------------------------------
    def _require_outcomes(self) -> None:
        if not self.outcomes:
            raise InsufficientSampleError(
                f"no successful trials ({len(self.failures)} failed)"
            )

    def trial_summary(self) -> Dict[str, Any]:
        return {
            "requested": self.config.iterations,
            "succeeded": len(self.outcomes),
            "failed": len(self.failures),
            "truncated": self.truncated,
            "failures": [f.to_dict() for f in self.failures],
        }

    def checkpoint_summary(self) -> Dict[int, Dict[str, CheckpointAggregate]]:
        """Return per-checkpoint, per-algorithm means across trials."""

        self._require_outcomes()
        summary: Dict[int, Dict[str, CheckpointAggregate]] = {}
        for day in self.config.checkpoints:
            summary[day] = {}
            for algorithm in self.config.algorithms:
                stats = [o.stats[algorithm][day] for o in self.outcomes]
                summary[day][algorithm] = CheckpointAggregate(
                    retention_rate=float(np.mean([s.retention_rate for s in stats])),
                    mean_confidence=float(np.mean([s.mean_confidence for s in stats])),
                    mean_reviews=float(np.mean([s.mean_reviews for s in stats])),
                    sample_size=max(s.sample_size for s in stats),
                )
        return summary

    def mean_total_reviews(self) -> Dict[str, float]:
        self._require_outcomes()
        return {
            algorithm: float(np.mean([o.total_reviews[algorithm] for o in self.outcomes]))
            for algorithm in self.config.algorithms
        }

    def retention_rates(self, algorithm: str, day: Optional[int] = None) -> List[float]:
        """Return per-trial retention rates at ``day`` (final checkpoint by default)."""

        day = self.config.checkpoints[-1] if day is None else day
        return [o.stats[algorithm][day].retention_rate for o in self.outcomes]

    def final_statistics(self) -> Dict[str, Descriptive]:
        self._require_outcomes()
        return {alg: describe(self.retention_rates(alg)) for alg in self.config.algorithms}

    def significance(self) -> WelchResult:
        self._require_outcomes()
        return welch_t_test(
            self.retention_rates(self.config.candidate),
            self.retention_rates(self.config.baseline),
        )

    def decision(self) -> Decision:
        final = self.checkpoint_summary()[self.config.checkpoints[-1]]
        reviews = self.mean_total_reviews()
        cand, base = self.config.candidate, self.config.baseline
        return decide(
            cand,
            base,
            final[cand].retention_rate,
            final[base].retention_rate,
            self.significance().significant,
            reviews[cand],
            reviews[base],
        )

    def trial_rows(self) -> List[Dict[str, Any]]:
        return [row for outcome in self.outcomes for row in outcome.rows()]

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON result document."""

        welch = self.significance()
        return {
            "schema_version": SCHEMA_VERSION,
            "timestamp": self.timestamp,
            "config": self.config.to_dict(),
            "elapsed_s": round(self.elapsed_s, 3),
            "trials": self.trial_summary(),
            "checkpoints": {
                str(day): {alg: agg.to_dict() for alg, agg in per_alg.items()}
                for day, per_alg in self.checkpoint_summary().items()
            },
            "total_reviews": {
                alg: round(val, 1) for alg, val in self.mean_total_reviews().items()
            },
            "statistics": {
                "checkpoint": self.config.checkpoints[-1],
                **{alg: d.to_dict() for alg, d in self.final_statistics().items()},
                "welch": welch.to_dict(),
            },
            "significant": welch.significant,
            "decision": self.decision().to_dict(),
        }


# ----------------------------------------------------------------------
def _trial_population(
    config: RunConfig, rng: np.random.Generator, palace: Optional[Mapping[str, Any]]
) -> PopulationArena:
    if palace is not None:
        return records_from_palace(
            palace, rng, strength_range=config.strength_range, limit=config.sample_size
        )
    return generate_population(config.sample_size, rng, strength_range=config.strength_range)


def run_trial(
    config: RunConfig,
    trial: int,
    seed_seq: np.random.SeedSequence,
    palace: Optional[Mapping[str, Any]] = None,
) -> TrialOutcome:
    """Simulate both algorithms once on a shared fresh population.

    The population and simulation streams are derived from ``seed_seq``
    without spawning from it, so repeated calls with the same sequence
    reproduce the same trial.
    """

    pop_seq, sim_seq = (
        np.random.SeedSequence(seed_seq.entropy, spawn_key=(*seed_seq.spawn_key, k))
        for k in (0, 1)
    )
    population = _trial_population(config, np.random.default_rng(pop_seq), palace)
    stats: Dict[str, Dict[int, CheckpointStats]] = {}
    totals: Dict[str, int] = {}
    success: Dict[str, float] = {}
    for algorithm in config.algorithms:
        model = RetentionModel(config.interval_table(algorithm), np.random.default_rng(sim_seq))
        loop = SchedulerLoop(model, config.duration_days, config.checkpoints)
        run = loop.run(population.copy(), algorithm)
        stats[algorithm] = run.stats()
        totals[algorithm] = run.total_reviews
        success[algorithm] = run.counters.success_rate()
    return TrialOutcome(trial=trial, stats=stats, total_reviews=totals, success_rate=success)


def compare_algorithms(
    config: RunConfig,
    *,
    palace: Optional[Mapping[str, Any]] = None,
    clock: Callable[[], float] = time.monotonic,
) -> BatchResult:
    """Run ``config.iterations`` paired trials and collect the outcomes.

    Raises
    ------
    InsufficientSampleError
        If ``config.sample_size`` is ``0``.
    ConfigurationError
        For any other invalid setting or a malformed palace export.
    """

    config.validate()
    if palace is not None:
        validate_palace(palace)

    budget = config.iterations
    if config.max_trials is not None:
        budget = min(budget, config.max_trials)
    children = np.random.SeedSequence(config.seed).spawn(config.iterations)
    start = clock()
    outcomes: List[TrialOutcome] = []
    failures: List[TrialFailure] = []
    truncated = budget < config.iterations

    for trial in range(budget):
        if config.deadline_s is not None and clock() - start > config.deadline_s:
            log.warning(
                "deadline of %.1fs reached after %d/%d trials",
                config.deadline_s,
                trial,
                config.iterations,
            )
            truncated = True
            break
        if trial % PROGRESS_EVERY == 0:
            log.info("trial %d/%d", trial, budget)
        try:
            outcomes.append(run_trial(config, trial, children[trial], palace))
        except SimulationError as exc:
            failure = TrialFailure.from_error(trial, exc)
            log.warning("trial %d failed: %s", trial, exc)
            failures.append(failure)

    elapsed = clock() - start
    log.info(
        "completed %d trials (%d failed) in %.2fs",
        len(outcomes) + len(failures),
        len(failures),
        elapsed,
    )
    return BatchResult(
        config=config,
        outcomes=outcomes,
        failures=failures,
        truncated=truncated,
        elapsed_s=elapsed,
    )


__all__ = [
    "SCHEMA_VERSION",
    "BatchResult",
    "CheckpointAggregate",
    "TrialFailure",
    "TrialOutcome",
    "compare_algorithms",
    "run_trial",
]
