# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Render simulation results as Markdown and console tables."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
ENV = Environment(loader=FileSystemLoader(TEMPLATE_DIR), keep_trailing_newline=True)

_VERDICT_LABELS = {
    "candidate_wins": "candidate wins: replace the baseline as default",
    "candidate_partial_win": "candidate partial win: offer as an intensive mode",
    "no_significant_difference": "no significant difference: keep the baseline",
    "baseline_wins": "baseline wins: confirm as default",
    "keep_baseline": "keep the baseline: no compelling reason to change",
}


def verdict_label(verdict: str) -> str:
    """Return a human-friendly label for a decision ``verdict``."""

    return _VERDICT_LABELS.get(verdict, verdict)


def signed(value: float, digits: int = 1) -> str:
    """Format ``value`` with an explicit sign."""

    return f"{value:+.{digits}f}"


def make_table(rows: Iterable[Sequence[object]], columns: Sequence[str]) -> str:
    """Return a Markdown table for ``rows``."""

    header = "| " + " | ".join(columns) + " |"
    sep = "|" + "|".join("---" for _ in columns) + "|"
    lines = [header, sep]
    for row in rows:
        lines.append("| " + " | ".join(str(c) for c in row) + " |")
    return "\n".join(lines)


def checkpoint_table(result: Mapping[str, Any]) -> str:
    """Return retention rates per checkpoint for candidate and baseline."""

    cand = result["config"]["candidate"]
    base = result["config"]["baseline"]
    rows = []
    for day, per_alg in sorted(result["checkpoints"].items(), key=lambda kv: int(kv[0])):
        c = per_alg[cand]
        b = per_alg[base]
        rows.append(
            (
                day,
                f"{c['retention_rate']:.1f}%",
                f"{b['retention_rate']:.1f}%",
                signed(c["retention_rate"] - b["retention_rate"]) + "%",
                f"{c['mean_confidence']:.3f} / {b['mean_confidence']:.3f}",
                f"{c['mean_reviews']:.1f} / {b['mean_reviews']:.1f}",
            )
        )
    return make_table(rows, ["day", cand, base, "diff", "confidence", "reviews"])


def render_report(result: Mapping[str, Any], template: str = "report.md.j2") -> str:
    """Render ``result`` with the Jinja2 ``template``."""

    tmpl = ENV.get_template(template)
    return tmpl.render(
        result=result,
        table=checkpoint_table(result),
        verdict=verdict_label(result["decision"]["verdict"]),
        signed=signed,
    )


def console_summary(result: Mapping[str, Any]) -> str:
    """Return a short plain-text summary for terminal output."""

    cfg = result["config"]
    stats = result["statistics"]
    welch = stats["welch"]
    lines = [
        f"{cfg['candidate']} vs {cfg['baseline']}: "
        f"{result['trials']['succeeded']} trials, {result['trials']['failed']} failed",
        checkpoint_table(result),
    ]
    for alg in (cfg["candidate"], cfg["baseline"]):
        d = stats[alg]
        lines.append(
            f"{alg:12} mean {d['mean']:.2f}% (std={d['std']:.2f}, "
            f"range {d['min']:.1f}-{d['max']:.1f})"
        )
    t = "n/a" if welch["t"] is None else f"{welch['t']:.3f}"
    lines.append(f"t={t} df={welch['df']} p{welch['p']} significant={welch['significant']}")
    lines.append(f"verdict: {verdict_label(result['decision']['verdict'])}")
    return "\n".join(lines)


__all__ = [
    "ENV",
    "TEMPLATE_DIR",
    "checkpoint_table",
    "console_summary",
    "make_table",
    "render_report",
    "signed",
    "verdict_label",
]
