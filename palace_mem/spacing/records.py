"""Dataclasses for memories under spaced review."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

MAX_STRENGTH = 0.95


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""

    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ReviewEvent:
    """One completed review of a memory."""

    day: int
    success: bool
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"day": self.day, "success": self.success, "confidence": self.confidence}


@dataclass(frozen=True)
class MemoryRecord:
    """A single fact tracked for spaced review.

    Records are immutable; :meth:`RetentionModel.review` returns an updated
    copy. ``last_review_day`` and ``next_review_day`` are ``None`` until the
    first review; the scheduler treats an unscheduled record as due on day 1.
    """

    id: str
    created: str = field(default_factory=utc_now_iso)
    base_strength: float = 0.5
    review_count: int = 0
    last_review_day: Optional[int] = None
    next_review_day: Optional[int] = None
    review_history: Tuple[ReviewEvent, ...] = ()
    subject: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "created": self.created,
            "subject": self.subject,
            "base_strength": self.base_strength,
            "review_count": self.review_count,
            "last_review_day": self.last_review_day,
            "next_review_day": self.next_review_day,
            "review_history": [ev.to_dict() for ev in self.review_history],
        }


__all__ = ["MAX_STRENGTH", "MemoryRecord", "ReviewEvent", "utc_now_iso"]
