# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Interval tables for spaced review scheduling.

Summary
-------
An interval table is a fixed, strictly increasing sequence of day offsets
indexed by a memory's review count. Once the review count runs past the end
of the table the last offset is reused. Two canonical tables are provided:

* ``fibonacci`` – 1, 2, 3, 5, 8, ... 233 days
* ``exponential`` – roughly doubling, 1, 3, 7, 14, ... 480 days

See Also
--------
palace_mem.spacing.retention.RetentionModel
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Tuple

from palace_mem.errors import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from .records import MemoryRecord


FIBONACCI_OFFSETS: Tuple[int, ...] = (1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233)
EXPONENTIAL_OFFSETS: Tuple[int, ...] = (1, 3, 7, 14, 30, 60, 120, 240, 480)


@dataclass(frozen=True)
class IntervalTable:
    """Named sequence of review offsets in days.

    Parameters
    ----------
    name : str
        Algorithm tag, e.g. ``"fibonacci"``.
    offsets : tuple of int
        Positive, strictly increasing day offsets.

    Examples
    --------
    >>> IntervalTable("short", (1, 2, 4)).offset(7)
    4
    """

    name: str
    offsets: Tuple[int, ...]

    def __post_init__(self) -> None:
        offsets = tuple(int(o) for o in self.offsets)
        if not offsets:
            raise ConfigurationError(f"interval table {self.name!r} is empty")
        if offsets[0] <= 0:
            raise ConfigurationError(f"interval table {self.name!r} must start above 0")
        for prev, cur in zip(offsets, offsets[1:]):
            if cur <= prev:
                raise ConfigurationError(
                    f"interval table {self.name!r} must be strictly increasing: "
                    f"{prev} followed by {cur}"
                )
        object.__setattr__(self, "offsets", offsets)

    def __len__(self) -> int:
        return len(self.offsets)

    def level(self, review_count: int) -> int:
        """Return the table index used for ``review_count``."""

        if review_count < 0:
            raise ConfigurationError(f"review count must be >= 0, got {review_count}")
        return min(review_count, len(self.offsets) - 1)

    def offset(self, review_count: int) -> int:
        """Return ``offsets[min(review_count, len - 1)]``."""

        return self.offsets[self.level(review_count)]


FIBONACCI = IntervalTable("fibonacci", FIBONACCI_OFFSETS)
EXPONENTIAL = IntervalTable("exponential", EXPONENTIAL_OFFSETS)

_TABLES: Dict[str, IntervalTable] = {
    FIBONACCI.name: FIBONACCI,
    EXPONENTIAL.name: EXPONENTIAL,
}


def available_tables() -> Tuple[str, ...]:
    """Return the names of the built-in tables."""

    return tuple(sorted(_TABLES))


def get_interval_table(
    tag: str, extra: Mapping[str, Iterable[int]] | None = None
) -> IntervalTable:
    """Return the interval table registered under ``tag``.

    ``extra`` maps additional names to offsets, e.g. custom tables given in
    the run configuration. Custom entries shadow the built-in ones.
    """

    if extra and tag in extra:
        return IntervalTable(tag, tuple(extra[tag]))
    try:
        return _TABLES[tag]
    except KeyError:
        known = ", ".join(sorted(set(_TABLES) | set(extra or {})))
        raise ConfigurationError(f"unknown interval table {tag!r}; known: {known}") from None


def next_interval(table: IntervalTable, review_count: int) -> int:
    """Return the day offset for ``review_count`` under ``table``."""

    return table.offset(review_count)


@dataclass(frozen=True)
class NextReview:
    """Scheduling details for a memory's upcoming review."""

    algorithm: str
    days_from_now: int
    interval_index: int
    total_reviews: int
    scheduled_days: int
    due_day: int


def calculate_next_review(record: "MemoryRecord", table: IntervalTable) -> NextReview:
    """Return when ``record`` is next due under ``table``.

    The offset is looked up with the record's current review count and added
    to its last review day (day ``0`` for never-reviewed records).

    Examples
    --------
    >>> from palace_mem.spacing.records import MemoryRecord
    >>> calculate_next_review(MemoryRecord("m", review_count=2), FIBONACCI).days_from_now
    3
    """

    level = table.level(record.review_count)
    days = table.offsets[level]
    start = record.last_review_day or 0
    return NextReview(
        algorithm=table.name,
        days_from_now=days,
        interval_index=level,
        total_reviews=record.review_count + 1,
        scheduled_days=sum(table.offsets[: level + 1]),
        due_day=start + days,
    )


__all__ = [
    "FIBONACCI",
    "FIBONACCI_OFFSETS",
    "EXPONENTIAL",
    "EXPONENTIAL_OFFSETS",
    "IntervalTable",
    "NextReview",
    "available_tables",
    "calculate_next_review",
    "get_interval_table",
    "next_interval",
]
