import csv
import json

import pytest

from palace_eval.comparator import compare_algorithms
from palace_eval.config import RunConfig
from palace_eval.reporting import checkpoint_table, console_summary, render_report, verdict_label
from palace_eval.writers import (
    REPORT_FILE,
    RESULTS_FILE,
    SUMMARY_CSV,
    TRIALS_FILE,
    summary_rows,
    write_report,
    write_results,
    write_summary_csv,
    write_trials,
)
from palace_mem.common.io import read_json, read_jsonl


@pytest.fixture(scope="module")
def batch():
    cfg = RunConfig(duration_days=30, sample_size=8, iterations=3, checkpoints=(15, 30), seed=11)
    return compare_algorithms(cfg)


def test_result_artifacts(tmp_path, batch) -> None:
    result = batch.to_dict()
    out = tmp_path / "runs" / "r1"
    path = write_results(out, result)
    assert path.name == RESULTS_FILE
    assert read_json(path) == json.loads(json.dumps(result))

    write_trials(out, batch.trial_rows())
    rows = list(read_jsonl(out / TRIALS_FILE))
    # trials x algorithms x checkpoints
    assert len(rows) == 3 * 2 * 2
    assert {r["algorithm"] for r in rows} == {"fibonacci", "exponential"}
    assert all(0.0 <= r["success_rate"] <= 1.0 for r in rows)

    write_summary_csv(out, result)
    with (out / SUMMARY_CSV).open(newline="", encoding="utf-8") as fh:
        csv_rows = list(csv.DictReader(fh))
    assert [(r["checkpoint"], r["algorithm"]) for r in csv_rows] == [
        ("15", "exponential"),
        ("15", "fibonacci"),
        ("30", "exponential"),
        ("30", "fibonacci"),
    ]


def test_summary_rows_sorted_numerically() -> None:
    result = {
        "checkpoints": {
            "90": {"a": {"retention_rate": 1.0}},
            "7": {"a": {"retention_rate": 2.0}},
        }
    }
    assert [r["checkpoint"] for r in summary_rows(result)] == [7, 90]


def test_report_contents(tmp_path, batch) -> None:
    result = batch.to_dict()
    md = render_report(result)
    assert md.startswith("# Retention: fibonacci vs exponential")
    assert "## Checkpoint retention" in md
    assert checkpoint_table(result) in md
    assert verdict_label(result["decision"]["verdict"]) in md
    assert "Failed trials" not in md
    path = write_report(tmp_path, md)
    assert path.name == REPORT_FILE
    assert path.read_text(encoding="utf-8") == md


def test_report_lists_failures(batch) -> None:
    result = batch.to_dict()
    result["trials"] = dict(result["trials"])
    result["trials"]["failures"] = [
        {"trial": 4, "kind": "RangeViolationError", "message": "boom", "day": 3, "checkpoint": None}
    ]
    md = render_report(result)
    assert "## Failed trials" in md
    assert "| 4 | RangeViolationError | 3 |  | boom |" in md


def test_console_summary(batch) -> None:
    text = console_summary(batch.to_dict())
    assert text.splitlines()[0] == "fibonacci vs exponential: 3 trials, 0 failed"
    assert "verdict:" in text
    assert "| day | fibonacci | exponential |" in text


def test_verdict_label_falls_back() -> None:
    assert verdict_label("candidate_wins").startswith("candidate wins")
    assert verdict_label("unknown") == "unknown"
