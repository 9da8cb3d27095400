# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Filesystem writers for simulation outputs."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List, Mapping

from palace_mem.common.io import atomic_write_json, atomic_write_jsonl

RESULTS_FILE = "retention_results.json"
TRIALS_FILE = "trials.jsonl"
SUMMARY_CSV = "checkpoints.csv"
REPORT_FILE = "report.md"

SUMMARY_FIELDS = [
    "checkpoint",
    "algorithm",
    "retention_rate",
    "mean_confidence",
    "mean_reviews",
    "sample_size",
]


def ensure_run_dir(root: Path) -> Path:
    """Ensure ``root`` exists and return it."""
    root.mkdir(parents=True, exist_ok=True)
    return root


def write_results(out_dir: Path, result: Mapping[str, Any]) -> Path:
    """Atomically write the result document to ``out_dir/retention_results.json``."""
    path = ensure_run_dir(out_dir) / RESULTS_FILE
    atomic_write_json(path, dict(result))
    return path


def write_trials(out_dir: Path, rows: List[Dict[str, Any]]) -> Path:
    """Write per-trial checkpoint rows as JSONL."""
    path = ensure_run_dir(out_dir) / TRIALS_FILE
    atomic_write_jsonl(path, rows)
    return path


def summary_rows(result: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Flatten ``result["checkpoints"]`` into CSV rows."""

    rows: List[Dict[str, Any]] = []
    for day, per_alg in result.get("checkpoints", {}).items():
        for algorithm, stats in per_alg.items():
            rows.append({"checkpoint": int(day), "algorithm": algorithm, **stats})
    rows.sort(key=lambda r: (r["checkpoint"], r["algorithm"]))
    return rows


def write_summary_csv(out_dir: Path, result: Mapping[str, Any]) -> Path:
    """Write the checkpoint summary of ``result`` as CSV."""
    path = ensure_run_dir(out_dir) / SUMMARY_CSV
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=SUMMARY_FIELDS)
        writer.writeheader()
        writer.writerows(summary_rows(result))
    return path


def write_report(out_dir: Path, markdown: str) -> Path:
    path = ensure_run_dir(out_dir) / REPORT_FILE
    path.write_text(markdown, encoding="utf-8")
    return path


__all__ = [
    "REPORT_FILE",
    "RESULTS_FILE",
    "SUMMARY_CSV",
    "TRIALS_FILE",
    "ensure_run_dir",
    "summary_rows",
    "write_report",
    "write_results",
    "write_summary_csv",
    "write_trials",
]
