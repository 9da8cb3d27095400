# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Error taxonomy for the retention simulator.

All errors derive from :class:`SimulationError`, itself a ``ValueError`` so
callers that already guard configuration mistakes with ``ValueError`` keep
working. Each error may carry the trial index, simulated day and checkpoint
at which it was raised; the comparator fills these in while unwinding a
failed trial.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SimulationError(ValueError):
    """Base class for structural simulation failures."""

    def __init__(
        self,
        message: str,
        *,
        trial: Optional[int] = None,
        day: Optional[int] = None,
        checkpoint: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.trial = trial
        self.day = day
        self.checkpoint = checkpoint

    def with_context(
        self,
        *,
        trial: Optional[int] = None,
        day: Optional[int] = None,
        checkpoint: Optional[int] = None,
    ) -> "SimulationError":
        """Fill in missing context fields and return ``self``."""

        if self.trial is None and trial is not None:
            self.trial = trial
        if self.day is None and day is not None:
            self.day = day
        if self.checkpoint is None and checkpoint is not None:
            self.checkpoint = checkpoint
        return self

    def context(self) -> Dict[str, Any]:
        """Return the error context as a JSON-serialisable dictionary."""

        return {
            "kind": type(self).__name__,
            "message": self.message,
            "trial": self.trial,
            "day": self.day,
            "checkpoint": self.checkpoint,
        }

    def __str__(self) -> str:
        parts = [
            f"{name}={value}"
            for name, value in (
                ("trial", self.trial),
                ("day", self.day),
                ("checkpoint", self.checkpoint),
            )
            if value is not None
        ]
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class ConfigurationError(SimulationError):
    """Invalid run configuration or interval table."""


class InsufficientSampleError(SimulationError):
    """A statistic was requested over zero records or zero trials."""


class RangeViolationError(SimulationError):
    """A computed probability fell outside ``[0, 1]``."""


__all__ = [
    "SimulationError",
    "ConfigurationError",
    "InsufficientSampleError",
    "RangeViolationError",
]
