# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Day-by-day review scheduler.

Summary
-------
Drives one population through ``duration_days`` simulated days. Each day the
records whose next review is due are recalled and reviewed in due-day order
and written back into the arena by index. On checkpoint days every record,
due or not, gets an extra non-mutating recall attempt whose outcome is kept
as a retention snapshot independent of the review schedule.

See Also
--------
palace_mem.spacing.retention.RetentionModel
palace_eval.comparator.compare_algorithms
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from palace_mem.common.telemetry import ReviewCounters
from palace_mem.errors import ConfigurationError, InsufficientSampleError, SimulationError

from .population import PopulationArena
from .retention import RetentionModel, due_positions

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckpointSample:
    """Recall outcome of one record at a checkpoint."""

    record_id: str
    recalled: bool
    confidence: float
    review_count: int


@dataclass(frozen=True)
class CheckpointStats:
    """Aggregate of all samples taken at one checkpoint."""

    retention_rate: float
    mean_confidence: float
    mean_reviews: float
    sample_size: int

    @classmethod
    def from_samples(cls, samples: Sequence[CheckpointSample]) -> "CheckpointStats":
        """Summarise ``samples``; an empty sequence has no defined rates."""

        n = len(samples)
        if n == 0:
            raise InsufficientSampleError("no records evaluated at checkpoint")
        recalled = sum(1 for s in samples if s.recalled)
        return cls(
            retention_rate=recalled / n * 100,
            mean_confidence=sum(s.confidence for s in samples) / n,
            mean_reviews=sum(s.review_count for s in samples) / n,
            sample_size=n,
        )

    def to_dict(self) -> Dict[str, float | int]:
        return {
            "retention_rate": round(self.retention_rate, 1),
            "mean_confidence": round(self.mean_confidence, 3),
            "mean_reviews": round(self.mean_reviews, 1),
            "sample_size": self.sample_size,
        }


@dataclass
class SimulationRun:
    """State of one population under one algorithm."""

    algorithm: str
    arena: PopulationArena
    day: int = 0
    samples: Dict[int, List[CheckpointSample]] = field(default_factory=dict)
    counters: ReviewCounters = field(default_factory=ReviewCounters)

    @property
    def total_reviews(self) -> int:
        return self.counters.reviews

    def checkpoint_stats(self, checkpoint: int) -> CheckpointStats:
        try:
            return CheckpointStats.from_samples(self.samples.get(checkpoint, []))
        except SimulationError as exc:
            exc.with_context(checkpoint=checkpoint)
            raise

    def stats(self) -> Dict[int, CheckpointStats]:
        """Return stats for every recorded checkpoint in day order."""

        return {day: self.checkpoint_stats(day) for day in sorted(self.samples)}


def validate_checkpoints(checkpoints: Iterable[int], duration_days: int) -> Tuple[int, ...]:
    """Return ``checkpoints`` sorted, rejecting empty or out-of-range sets."""

    if duration_days <= 0:
        raise ConfigurationError(f"duration_days must be > 0, got {duration_days}")
    days = tuple(sorted({int(d) for d in checkpoints}))
    if not days:
        raise ConfigurationError("at least one checkpoint day is required")
    bad = [d for d in days if d < 1 or d > duration_days]
    if bad:
        raise ConfigurationError(
            f"checkpoints {bad} outside simulated range 1..{duration_days}"
        )
    return days


class SchedulerLoop:
    """Advance a population day by day under a retention model.

    Parameters
    ----------
    model : RetentionModel
        Supplies recall attempts, review updates and randomness.
    duration_days : int
        Number of simulated days, ``> 0``.
    checkpoints : iterable of int
        Days in ``1..duration_days`` at which all records are evaluated.
    """

    def __init__(
        self, model: RetentionModel, duration_days: int, checkpoints: Iterable[int]
    ) -> None:
        self.model = model
        self.duration_days = int(duration_days)
        self.checkpoints = validate_checkpoints(checkpoints, self.duration_days)

    def due_indices(self, arena: PopulationArena, day: int) -> List[int]:
        """Return arena indices due by ``day``, earliest due day first."""

        return [idx for _, idx in due_positions(arena, day)]

    def step(self, run: SimulationRun, day: int) -> int:
        """Review every record due on ``day`` and return how many were reviewed."""

        indices = self.due_indices(run.arena, day)
        for idx in indices:
            record = run.arena[idx]
            attempt = self.model.attempt_recall(record, day)
            run.arena.update(idx, self.model.review(record, attempt.recalled, day))
            run.counters.record_review(attempt.recalled)
        run.day = day
        return len(indices)

    def evaluate_checkpoint(self, run: SimulationRun, day: int) -> List[CheckpointSample]:
        """Attempt recall of every record on ``day`` without changing state."""

        if len(run.arena) == 0:
            raise InsufficientSampleError("population is empty", checkpoint=day)
        samples: List[CheckpointSample] = []
        for record in run.arena:
            attempt = self.model.attempt_recall(record, day)
            samples.append(
                CheckpointSample(
                    record_id=record.id,
                    recalled=attempt.recalled,
                    confidence=attempt.probability,
                    review_count=record.review_count,
                )
            )
        run.samples[day] = samples
        run.counters.checkpoint_evals += len(samples)
        return samples

    def run(self, arena: PopulationArena, algorithm: str | None = None) -> SimulationRun:
        """Simulate ``arena`` for the configured number of days.

        The arena is owned by the returned run and updated in place.
        """

        run = SimulationRun(algorithm=algorithm or self.model.algorithm, arena=arena)
        checkpoints = set(self.checkpoints)
        for day in range(1, self.duration_days + 1):
            try:
                reviewed = self.step(run, day)
                if day in checkpoints:
                    self.evaluate_checkpoint(run, day)
            except SimulationError as exc:
                exc.with_context(day=day, checkpoint=day if day in checkpoints else None)
                raise
            if reviewed:
                log.debug("%s day %d: %d reviews", run.algorithm, day, reviewed)
        return run


__all__ = [
    "CheckpointSample",
    "CheckpointStats",
    "SchedulerLoop",
    "SimulationRun",
    "validate_checkpoints",
]
