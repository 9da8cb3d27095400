"""Verdict rules for a candidate-vs-baseline comparison."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

CANDIDATE_WINS = "candidate_wins"
CANDIDATE_PARTIAL_WIN = "candidate_partial_win"
NO_SIGNIFICANT_DIFFERENCE = "no_significant_difference"
BASELINE_WINS = "baseline_wins"
KEEP_BASELINE = "keep_baseline"

# retention percentage points
CLEAR_MARGIN = 5.0
NOISE_MARGIN = 2.0


@dataclass(frozen=True)
class Decision:
    """Recommended default algorithm with the numbers behind it."""

    verdict: str
    reason: str
    retention_diff: float
    significant: bool
    review_efficiency: Optional[float]

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["retention_diff"] = round(self.retention_diff, 1)
        if self.review_efficiency is not None:
            data["review_efficiency"] = round(self.review_efficiency, 2)
        return data


def review_efficiency(
    candidate_rate: float,
    baseline_rate: float,
    candidate_reviews: float,
    baseline_reviews: float,
) -> Optional[float]:
    """Return retention per review of the candidate relative to the baseline.

    ``1.0`` means equal efficiency; ``None`` when any term is zero.
    """

    if not candidate_reviews or not baseline_reviews or not baseline_rate:
        return None
    return (candidate_rate / candidate_reviews) / (baseline_rate / baseline_reviews)


def decide(
    candidate: str,
    baseline: str,
    candidate_rate: float,
    baseline_rate: float,
    significant: bool,
    candidate_reviews: float,
    baseline_reviews: float,
) -> Decision:
    """Apply the verdict rules to final-checkpoint retention rates."""

    diff = candidate_rate - baseline_rate
    efficiency = review_efficiency(
        candidate_rate, baseline_rate, candidate_reviews, baseline_reviews
    )
    if diff > CLEAR_MARGIN and significant:
        verdict = CANDIDATE_WINS
        reason = (
            f"{candidate} retains {candidate_rate:.1f}% vs {baseline_rate:.1f}% "
            "with a significant difference"
        )
    elif 0 < diff <= CLEAR_MARGIN and significant:
        verdict = CANDIDATE_PARTIAL_WIN
        extra = (
            f" but needs {(candidate_reviews / baseline_reviews - 1) * 100:.0f}% more reviews"
            if baseline_reviews
            else ""
        )
        reason = f"modest improvement of {diff:.1f} points{extra}"
    elif abs(diff) <= NOISE_MARGIN and not significant:
        verdict = NO_SIGNIFICANT_DIFFERENCE
        reason = f"equal within noise; keep {baseline}"
    elif diff < -CLEAR_MARGIN and significant:
        verdict = BASELINE_WINS
        reason = (
            f"{baseline} retains {baseline_rate:.1f}% vs {candidate_rate:.1f}% "
            "with a significant difference"
        )
    else:
        verdict = KEEP_BASELINE
        reason = f"difference of {diff:.1f} points is not compelling"
    return Decision(
        verdict=verdict,
        reason=reason,
        retention_diff=diff,
        significant=significant,
        review_efficiency=efficiency,
    )


__all__ = [
    "BASELINE_WINS",
    "CANDIDATE_PARTIAL_WIN",
    "CANDIDATE_WINS",
    "KEEP_BASELINE",
    "NO_SIGNIFICANT_DIFFERENCE",
    "Decision",
    "decide",
    "review_efficiency",
]
