# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Shared I/O and telemetry helpers."""

from .io import (
    atomic_write_file,
    atomic_write_json,
    atomic_write_jsonl,
    read_json,
    read_jsonl,
)
from .telemetry import ReviewCounters

__all__ = [
    "ReviewCounters",
    "atomic_write_file",
    "atomic_write_json",
    "atomic_write_jsonl",
    "read_json",
    "read_jsonl",
]
