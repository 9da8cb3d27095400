"""Thin wrapper exposing the retention comparison CLI.

The implementation resides in :mod:`palace_eval.cli`. This script forwards
to :func:`palace_eval.cli.main` so the simulation can be run from a source
checkout without installing the package::

    python scripts/run_simulation.py iterations=1000 seed=42
    python scripts/run_simulation.py --config-name smoke
"""

import sys
from pathlib import Path

import hydra
from omegaconf import DictConfig

sys.path.append(str(Path(__file__).resolve().parent.parent))

from palace_eval.cli import main as sim_main  # noqa: E402


@hydra.main(
    version_base=None, config_path="../palace_eval/configs/sim", config_name="default"
)
def main(cfg: DictConfig) -> None:
    """Hydra entry point that forwards to :mod:`palace_eval.cli`."""

    sim_main(cfg)


if __name__ == "__main__":
    main()
