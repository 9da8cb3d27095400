# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Command line entry point for retention comparisons.

Example usage from the command line::

    python -m palace_eval iterations=500 seed=7

Compare a custom table against the baseline::

    python -m palace_eval +tables.weekly=[1,7,14,28] algorithms.candidate=weekly

Seed the population from a palace export instead of synthetic memories::

    python -m palace_eval population=exports/palace.json sample_size=200

Outputs (``retention_results.json``, ``trials.jsonl``, ``checkpoints.csv`` and
``report.md``) are written to ``runs/<run_id>/<candidate>_vs_<baseline>/``
unless ``outdir=...`` is given.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import hydra
from hydra.utils import to_absolute_path
from omegaconf import DictConfig

from palace_mem.errors import InsufficientSampleError
from palace_mem.spacing.palace import load_palace
from palace_mem.utils.ids import default_run_id, validate_run_id

from .comparator import SCHEMA_VERSION, compare_algorithms
from .config import RunConfig, load_run_config
from .reporting import console_summary, render_report
from .writers import write_report, write_results, write_summary_csv, write_trials

logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)


def run_dir(cfg: DictConfig, run_cfg: RunConfig, run_id: str) -> Path:
    """Return the output directory for this run."""

    outdir = cfg.get("outdir")
    if outdir:
        return Path(to_absolute_path(str(outdir)))
    name = f"{run_cfg.candidate}_vs_{run_cfg.baseline}"
    return Path(to_absolute_path("runs")) / run_id / name


def main(cfg: DictConfig) -> Dict[str, Any]:
    """Run a trial batch described by ``cfg`` and persist its results."""

    run_id = validate_run_id(str(cfg.get("run_id") or default_run_id()))
    run_cfg = load_run_config(cfg)
    palace = None
    if run_cfg.population:
        palace = load_palace(to_absolute_path(run_cfg.population))
        log.info("seeding population from %s", run_cfg.population)
    outdir = run_dir(cfg, run_cfg, run_id)

    batch = compare_algorithms(run_cfg, palace=palace)
    try:
        result = batch.to_dict()
    except InsufficientSampleError:
        write_results(
            outdir,
            {
                "schema_version": SCHEMA_VERSION,
                "timestamp": batch.timestamp,
                "run_id": run_id,
                "config": run_cfg.to_dict(),
                "trials": batch.trial_summary(),
                "status": "failed",
            },
        )
        log.error("all %d trials failed; see %s", len(batch.failures), outdir)
        raise
    result["run_id"] = run_id
    result["status"] = "completed"

    path = write_results(outdir, result)
    write_trials(outdir, batch.trial_rows())
    write_summary_csv(outdir, result)
    if cfg.get("report", True):
        write_report(outdir, render_report(result))
    print(console_summary(result))
    log.info("results saved to %s", path)
    return result


@hydra.main(version_base=None, config_path="configs/sim", config_name="default")
def cli(cfg: DictConfig) -> None:  # pragma: no cover - CLI entry point
    """Hydra entry point forwarding to :func:`main`."""

    main(cfg)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    cli()


__all__ = ["cli", "main", "run_dir"]
