# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Population arena holding the memories of one simulation run.

Records live in a list indexed by position. The scheduler owns the arena for
the duration of a run and writes updated copies back by index, so no record
is ever looked up by id inside the simulation loop. An id index is kept for
callers that address records by key.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from palace_mem.errors import ConfigurationError

from .records import MemoryRecord, utc_now_iso

DEFAULT_STRENGTH_RANGE: Tuple[float, float] = (0.4, 0.8)


class PopulationArena:
    """Index-addressed store of :class:`MemoryRecord` objects."""

    def __init__(self, records: Iterable[MemoryRecord] = ()) -> None:
        self._records: List[MemoryRecord] = []
        self._index: Dict[str, int] = {}
        for rec in records:
            self.add(rec)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MemoryRecord]:
        return iter(self._records)

    def __getitem__(self, idx: int) -> MemoryRecord:
        return self._records[idx]

    def add(self, record: MemoryRecord) -> int:
        """Append ``record`` and return its index."""

        if record.id in self._index:
            raise ConfigurationError(f"duplicate memory id {record.id!r}")
        self._records.append(record)
        idx = len(self._records) - 1
        self._index[record.id] = idx
        return idx

    def update(self, idx: int, record: MemoryRecord) -> None:
        """Replace the record at ``idx`` with an updated copy of itself."""

        current = self._records[idx]
        if current.id != record.id:
            raise ValueError(f"slot {idx} holds {current.id!r}, not {record.id!r}")
        self._records[idx] = record

    def get(self, record_id: str) -> Optional[MemoryRecord]:
        idx = self._index.get(record_id)
        return None if idx is None else self._records[idx]

    def index_of(self, record_id: str) -> int:
        return self._index[record_id]

    def records(self) -> Sequence[MemoryRecord]:
        """Return a read-only snapshot of all records."""

        return tuple(self._records)

    def copy(self) -> "PopulationArena":
        """Return an independent arena with the same records."""

        return PopulationArena(self._records)


def generate_population(
    size: int,
    rng: np.random.Generator,
    *,
    strength_range: Tuple[float, float] = DEFAULT_STRENGTH_RANGE,
    created: Optional[str] = None,
    prefix: str = "mem",
) -> PopulationArena:
    """Return ``size`` fresh memories with uniform random base strength.

    Parameters
    ----------
    size:
        Number of records, ``>= 0``.
    rng:
        Generator used for the base strengths.
    strength_range:
        ``(low, high)`` bounds for the initial strength; default ``(0.4, 0.8)``.
    created:
        Creation timestamp shared by all records; defaults to now.
    """

    if size < 0:
        raise ConfigurationError(f"population size must be >= 0, got {size}")
    low, high = strength_range
    if not 0.0 <= low <= high <= 1.0:
        raise ConfigurationError(f"invalid strength range {strength_range!r}")
    stamp = created or utc_now_iso()
    strengths = rng.uniform(low, high, size=size)
    return PopulationArena(
        MemoryRecord(id=f"{prefix}-{i}", created=stamp, base_strength=float(s))
        for i, s in enumerate(strengths)
    )


__all__ = ["DEFAULT_STRENGTH_RANGE", "PopulationArena", "generate_population"]
