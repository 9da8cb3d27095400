# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Trial batches, statistics and reports for retention simulations."""

from .comparator import (
    SCHEMA_VERSION,
    BatchResult,
    TrialFailure,
    TrialOutcome,
    compare_algorithms,
    run_trial,
)
from .config import RunConfig, load_run_config
from .decision import Decision, decide
from .stats import Descriptive, WelchResult, describe, welch_t_test

__all__ = [
    "SCHEMA_VERSION",
    "BatchResult",
    "TrialFailure",
    "TrialOutcome",
    "compare_algorithms",
    "run_trial",
    "RunConfig",
    "load_run_config",
    "Decision",
    "decide",
    "Descriptive",
    "WelchResult",
    "describe",
    "welch_t_test",
]
