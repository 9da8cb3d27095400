# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Descriptive statistics and a Welch-style significance indicator.

The significance indicator is a large-sample heuristic: it computes Welch's
``t`` statistic and the Welch–Satterthwaite degrees of freedom but calls a
difference significant whenever ``|t| > 2`` instead of looking up a Student-t
critical value. For ``df`` above roughly 30 this approximates ``p < 0.05``
(two-tailed); for small trial counts it is too liberal. Treat the verdict as
a screening signal, not a rigorous test.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from palace_mem.errors import InsufficientSampleError

T_THRESHOLD = 2.0


@dataclass(frozen=True)
class Descriptive:
    """Mean, population standard deviation, range and 95% CI half-width."""

    mean: float
    std: float
    min: float
    max: float
    ci95: float
    n: int

    def to_dict(self) -> Dict[str, float | int]:
        return {
            "mean": round(self.mean, 2),
            "std": round(self.std, 2),
            "min": round(self.min, 1),
            "max": round(self.max, 1),
            "ci95": round(self.ci95, 2),
            "n": self.n,
        }


def _ci95(std: float, n: int) -> float:
    """Return the 95% confidence half-width for ``n`` values."""
    if n < 2:
        return 0.0
    return 1.96 * std / math.sqrt(n)


def describe(values: Sequence[float]) -> Descriptive:
    """Summarise ``values``; an empty sequence raises ``InsufficientSampleError``."""

    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise InsufficientSampleError("cannot describe an empty sample")
    std = float(arr.std())
    return Descriptive(
        mean=float(arr.mean()),
        std=std,
        min=float(arr.min()),
        max=float(arr.max()),
        ci95=_ci95(std, int(arr.size)),
        n=int(arr.size),
    )


@dataclass(frozen=True)
class WelchResult:
    """Outcome of :func:`welch_t_test`."""

    t: float
    df: Optional[int]
    mean_diff: float
    standard_error: float
    significant: bool
    threshold: float = T_THRESHOLD

    @property
    def p_label(self) -> str:
        return "< 0.05" if self.significant else "> 0.05"

    def to_dict(self) -> Dict[str, object]:
        return {
            "t": round(self.t, 3) if math.isfinite(self.t) else None,
            "df": self.df,
            "mean_diff": round(self.mean_diff, 3),
            "standard_error": round(self.standard_error, 3),
            "p": self.p_label,
            "significant": self.significant,
            "threshold": self.threshold,
            "method": "welch, |t| > threshold heuristic",
        }


def welch_t_test(
    a: Sequence[float], b: Sequence[float], *, threshold: float = T_THRESHOLD
) -> WelchResult:
    """Compare the means of ``a`` and ``b`` without assuming equal variances.

    Parameters
    ----------
    a, b:
        Per-trial samples, e.g. retention rates of two algorithms.
    threshold:
        ``|t|`` above which the difference is flagged as significant.

    Returns
    -------
    WelchResult
        ``df`` is ``None`` when either sample has fewer than two values or
        both have zero variance. A zero standard error yields ``t = 0`` for
        equal means and ``±inf`` otherwise.
    """

    xa = np.asarray(a, dtype=float)
    xb = np.asarray(b, dtype=float)
    if xa.size == 0 or xb.size == 0:
        raise InsufficientSampleError("welch test needs at least one value per sample")
    na, nb = int(xa.size), int(xb.size)
    va = float(xa.std()) ** 2 / na
    vb = float(xb.std()) ** 2 / nb
    se = math.sqrt(va + vb)
    diff = float(xa.mean() - xb.mean())
    if se > 0:
        t = diff / se
    else:
        t = 0.0 if diff == 0 else math.copysign(math.inf, diff)

    df: Optional[int] = None
    if na > 1 and nb > 1:
        denom = va**2 / (na - 1) + vb**2 / (nb - 1)
        if denom > 0:
            df = int(math.floor((va + vb) ** 2 / denom))
    return WelchResult(
        t=t,
        df=df,
        mean_diff=diff,
        standard_error=se,
        significant=abs(t) > threshold,
        threshold=threshold,
    )


__all__ = ["Descriptive", "T_THRESHOLD", "WelchResult", "describe", "welch_t_test"]
