"""Review counters collected while a population is simulated."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass
class ReviewCounters:
    """Minimal review telemetry for one simulation run."""

    reviews: int = 0
    successes: int = 0
    failures: int = 0
    checkpoint_evals: int = 0

    def record_review(self, success: bool) -> None:
        """Count one completed review."""

        self.reviews += 1
        if success:
            self.successes += 1
        else:
            self.failures += 1

    def success_rate(self) -> float:
        """Return the share of successful reviews, ``0.0`` without reviews."""

        return self.successes / self.reviews if self.reviews else 0.0

    def snapshot(self) -> Dict[str, int | float]:
        return {
            "reviews": self.reviews,
            "successes": self.successes,
            "failures": self.failures,
            "checkpoint_evals": self.checkpoint_evals,
            "success_rate": self.success_rate(),
        }


__all__ = ["ReviewCounters"]
