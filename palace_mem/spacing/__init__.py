# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Spaced review simulation core."""

from .intervals import (
    EXPONENTIAL,
    FIBONACCI,
    IntervalTable,
    NextReview,
    available_tables,
    calculate_next_review,
    get_interval_table,
    next_interval,
)
from .palace import load_palace, records_from_palace, validate_palace
from .population import PopulationArena, generate_population
from .records import MemoryRecord, ReviewEvent
from .retention import RecallAttempt, RetentionModel
from .scheduler import CheckpointSample, CheckpointStats, SchedulerLoop, SimulationRun

__all__ = [
    "EXPONENTIAL",
    "FIBONACCI",
    "IntervalTable",
    "NextReview",
    "available_tables",
    "calculate_next_review",
    "get_interval_table",
    "next_interval",
    "load_palace",
    "records_from_palace",
    "validate_palace",
    "PopulationArena",
    "generate_population",
    "MemoryRecord",
    "ReviewEvent",
    "RecallAttempt",
    "RetentionModel",
    "CheckpointSample",
    "CheckpointStats",
    "SchedulerLoop",
    "SimulationRun",
]
