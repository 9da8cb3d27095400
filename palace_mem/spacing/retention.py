# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Forgetting-curve retention model.

Summary
-------
Models recall probability with an Ebbinghaus style decay ``R = exp(-t/S)``
where the memory strength ``S`` grows with the number of completed reviews.
A review-count dependent floor keeps well rehearsed memories from dropping
to zero and a fixed ceiling of ``0.98`` rules out perfect recall. A small
symmetric jitter stands in for everyday noise.

All randomness is drawn from the injected ``numpy.random.Generator`` so a
seeded generator reproduces a run exactly.

See Also
--------
palace_mem.spacing.scheduler.SchedulerLoop
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

import numpy as np

from palace_mem.errors import RangeViolationError

from .intervals import IntervalTable
from .records import MAX_STRENGTH, MemoryRecord, ReviewEvent


RETENTION_CEILING = 0.98
BASE_FLOOR = 0.1
FLOOR_PER_REVIEW = 0.02
STRENGTH_PER_REVIEW = 0.15
DECAY_SCALE = 10.0
JITTER_WIDTH = 0.15
SUCCESS_GAIN = 0.10
FAILURE_GAIN = 0.03
FIRST_REVIEW_DAY = 1


def due_day(record: MemoryRecord) -> int:
    """Return the day ``record`` is due; unscheduled records are due on day 1."""

    if record.next_review_day is None:
        return FIRST_REVIEW_DAY
    return record.next_review_day


def due_positions(records: Iterable[MemoryRecord], up_to_day: int) -> List[Tuple[int, int]]:
    """Return ``(due_day, position)`` pairs due by ``up_to_day``.

    Pairs are ordered by due day; ties keep the input order.
    """

    due = [(due_day(rec), pos) for pos, rec in enumerate(records)]
    return sorted(item for item in due if item[0] <= up_to_day)


@dataclass(frozen=True)
class RecallAttempt:
    """Outcome of a simulated recall."""

    recalled: bool
    probability: float
    days_since_review: int
    review_count: int


class RetentionModel:
    """Recall probability and review updates for one interval table.

    Parameters
    ----------
    table : IntervalTable
        Offsets used to schedule the next review.
    rng : numpy.random.Generator, optional
        Source of randomness; defaults to an unseeded generator.

    Examples
    --------
    >>> from palace_mem.spacing.intervals import FIBONACCI
    >>> model = RetentionModel(FIBONACCI, np.random.default_rng(0))
    >>> 0.1 <= model.calculate_retention(5, 2, 0.5) <= 0.98
    True
    """

    def __init__(self, table: IntervalTable, rng: Optional[np.random.Generator] = None) -> None:
        self.table = table
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def algorithm(self) -> str:
        return self.table.name

    # ------------------------------------------------------------------
    def calculate_retention(
        self, days_since_review: float, review_count: int, base_strength: float = 0.5
    ) -> float:
        """Return the probability of recalling a memory.

        Parameters
        ----------
        days_since_review : float
            Elapsed simulated days, ``>= 0``.
        review_count : int
            Completed reviews, ``>= 0``.
        base_strength : float, optional
            Intrinsic strength in ``[0, 1]``; default ``0.5``.

        Returns
        -------
        float
            Probability in ``[0.1, 0.98]``.

        Raises
        ------
        RangeViolationError
            If the decay term leaves ``[0, 1]``, which only happens for
            invalid inputs such as negative elapsed time.
        """

        if review_count < 0:
            raise RangeViolationError(f"review count must be >= 0, got {review_count}")
        multiplier = 1 + review_count * STRENGTH_PER_REVIEW
        strength = base_strength * multiplier
        if strength == 0:
            decay = 1.0 if days_since_review == 0 else 0.0
        else:
            try:
                decay = math.exp(-days_since_review / (strength * DECAY_SCALE))
            except OverflowError:
                decay = math.inf
        if math.isnan(decay) or not 0.0 <= decay <= 1.0:
            raise RangeViolationError(
                f"decay {decay!r} outside [0, 1] for days={days_since_review}, "
                f"reviews={review_count}, strength={base_strength}"
            )

        floor = BASE_FLOOR + review_count * FLOOR_PER_REVIEW
        jitter = (float(self.rng.random()) - 0.5) * JITTER_WIDTH
        return min(RETENTION_CEILING, max(floor, decay + jitter))

    def attempt_recall(self, record: MemoryRecord, current_day: int) -> RecallAttempt:
        """Simulate recalling ``record`` on ``current_day`` without mutating it."""

        days = current_day - (record.last_review_day or 0)
        probability = self.calculate_retention(days, record.review_count, record.base_strength)
        recalled = float(self.rng.random()) < probability
        return RecallAttempt(
            recalled=recalled,
            probability=probability,
            days_since_review=days,
            review_count=record.review_count,
        )

    def review(self, record: MemoryRecord, success: bool, current_day: int) -> MemoryRecord:
        """Return ``record`` updated after a review on ``current_day``.

        Success strengthens a memory more than failure; both are capped at
        ``0.95``. The next due day uses the incremented review count.
        """

        review_count = record.review_count + 1
        gain = SUCCESS_GAIN if success else FAILURE_GAIN
        strength = min(MAX_STRENGTH, record.base_strength + gain)
        u = float(self.rng.random())
        confidence = 0.7 + u * 0.3 if success else u * 0.4
        event = ReviewEvent(day=current_day, success=success, confidence=confidence)
        return replace(
            record,
            review_count=review_count,
            last_review_day=current_day,
            base_strength=strength,
            review_history=record.review_history + (event,),
            next_review_day=current_day + self.table.offset(review_count),
        )

    def scheduled_reviews(
        self, records: Iterable[MemoryRecord], up_to_day: int
    ) -> List[Tuple[int, MemoryRecord]]:
        """Return ``(due_day, record)`` pairs due by ``up_to_day``, earliest first."""

        pool = list(records)
        return [(day, pool[pos]) for day, pos in due_positions(pool, up_to_day)]


__all__ = [
    "FIRST_REVIEW_DAY",
    "RETENTION_CEILING",
    "RecallAttempt",
    "RetentionModel",
    "due_day",
    "due_positions",
]
