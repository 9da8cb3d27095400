"""Reporting helpers for simulation results."""

from .report import checkpoint_table, console_summary, render_report, verdict_label

__all__ = ["checkpoint_table", "console_summary", "render_report", "verdict_label"]
