"""Seed simulation populations from exported memory palaces.

A palace export is the native JSON format of the note-taking assistant::

    {"name": "...", "loci": [{"name": "...", "memories": [
        {"id": "...", "subject": "...", "confidence": 4, "reviewCount": 2}
    ]}]}

Only the plain memory fields are read; everything else is ignored.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import numpy as np

from palace_mem.common.io import read_json
from palace_mem.errors import ConfigurationError

from .population import DEFAULT_STRENGTH_RANGE, PopulationArena
from .records import MemoryRecord, utc_now_iso

log = logging.getLogger(__name__)

CONFIDENCE_MIN = 1
CONFIDENCE_MAX = 5


def load_palace(path: str | Path) -> Dict[str, Any]:
    """Read a palace export from ``path`` and check every memory in it."""

    palace = read_json(path)
    if not isinstance(palace, dict):
        raise ConfigurationError(f"{path} is not a palace export")
    validate_palace(palace)
    return palace


def iter_palace_memories(palace: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    """Yield every memory object in ``palace`` in locus order."""

    for locus in palace.get("loci") or []:
        if not isinstance(locus, Mapping):
            raise ConfigurationError(f"palace locus must be an object, got {locus!r}")
        for memory in locus.get("memories") or []:
            if not isinstance(memory, Mapping):
                raise ConfigurationError(f"palace memory must be an object, got {memory!r}")
            yield memory


def _memory_fields(memory: Mapping[str, Any], n: int) -> Tuple[str, Optional[float], int]:
    """Return ``(id, confidence, review_count)`` of the ``n``-th memory."""

    mem_id = str(memory.get("id") or f"mem-{n}")
    confidence = memory.get("confidence")
    try:
        if confidence is not None:
            confidence = float(confidence)
            if not math.isfinite(confidence):
                raise ValueError(f"confidence {confidence} is not finite")
        review_count = int(memory.get("reviewCount") or 0)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"palace memory {mem_id!r} is malformed: {exc}") from exc
    return mem_id, confidence, max(0, review_count)


def validate_palace(palace: Mapping[str, Any]) -> int:
    """Check the structure and every memory of ``palace``; return the memory count.

    Raises
    ------
    ConfigurationError
        If ``loci`` is not a list or a memory carries a confidence or
        review count that is not a number.
    """

    if not isinstance(palace, Mapping) or not isinstance(palace.get("loci") or [], list):
        raise ConfigurationError("not a palace export: expected an object with a 'loci' list")
    count = 0
    for n, memory in enumerate(iter_palace_memories(palace)):
        _memory_fields(memory, n)
        count += 1
    return count


def _strength_from_confidence(confidence: float, strength_range: Tuple[float, float]) -> float:
    low, high = strength_range
    clamped = min(CONFIDENCE_MAX, max(CONFIDENCE_MIN, confidence))
    frac = (clamped - CONFIDENCE_MIN) / (CONFIDENCE_MAX - CONFIDENCE_MIN)
    return low + frac * (high - low)


def records_from_palace(
    palace: Mapping[str, Any],
    rng: np.random.Generator,
    *,
    strength_range: Tuple[float, float] = DEFAULT_STRENGTH_RANGE,
    limit: Optional[int] = None,
) -> PopulationArena:
    """Convert the memories of ``palace`` into a population arena.

    Confidence on the 1–5 scale maps linearly onto ``strength_range``;
    memories without confidence draw their strength uniformly from it.
    ``reviewCount`` seeds the review count. Duplicate ids are skipped with a
    warning; malformed memories raise :class:`ConfigurationError`.
    """

    arena = PopulationArena()
    stamp = utc_now_iso()
    for n, memory in enumerate(iter_palace_memories(palace)):
        if limit is not None and len(arena) >= limit:
            break
        mem_id, confidence, review_count = _memory_fields(memory, n)
        if arena.get(mem_id) is not None:
            log.warning("skipping duplicate palace memory %s", mem_id)
            continue
        if confidence is None:
            strength = float(rng.uniform(*strength_range))
        else:
            strength = _strength_from_confidence(confidence, strength_range)
        arena.add(
            MemoryRecord(
                id=mem_id,
                created=str(memory.get("created") or stamp),
                base_strength=strength,
                review_count=review_count,
                subject=memory.get("subject"),
            )
        )
    return arena


__all__ = ["iter_palace_memories", "load_palace", "records_from_palace", "validate_palace"]
