# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""Run configuration for retention simulations.

Hydra hands the entry point a ``DictConfig``; :func:`load_run_config` folds
it into a typed :class:`RunConfig`. An empty sample is reported as
:class:`~palace_mem.errors.InsufficientSampleError` before any other check;
every other invalid setting raises :class:`ConfigurationError`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from omegaconf import DictConfig, OmegaConf

from palace_mem.errors import ConfigurationError, InsufficientSampleError
from palace_mem.spacing.intervals import IntervalTable, get_interval_table
from palace_mem.spacing.population import DEFAULT_STRENGTH_RANGE
from palace_mem.spacing.scheduler import validate_checkpoints

DEFAULT_CHECKPOINTS: Tuple[int, ...] = (30, 60, 90)


@dataclass
class RunConfig:
    """Settings for one candidate-vs-baseline trial batch."""

    duration_days: int = 90
    sample_size: int = 50
    iterations: int = 100
    checkpoints: Tuple[int, ...] = DEFAULT_CHECKPOINTS
    seed: int = 1337
    candidate: str = "fibonacci"
    baseline: str = "exponential"
    tables: Dict[str, Tuple[int, ...]] = field(default_factory=dict)
    strength_range: Tuple[float, float] = DEFAULT_STRENGTH_RANGE
    max_trials: Optional[int] = None
    deadline_s: Optional[float] = None
    population: Optional[str] = None

    def validate(self) -> "RunConfig":
        """Raise :class:`ConfigurationError` on invalid settings; return ``self``."""

        if self.sample_size == 0:
            raise InsufficientSampleError("sample_size is 0; retention rates are undefined")
        for name in ("duration_days", "sample_size", "iterations"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.seed, int) or isinstance(self.seed, bool) or self.seed < 0:
            raise ConfigurationError(f"seed must be a non-negative integer, got {self.seed!r}")
        self.checkpoints = validate_checkpoints(self.checkpoints, self.duration_days)
        if self.candidate == self.baseline:
            raise ConfigurationError("candidate and baseline must be different algorithms")
        self.interval_table(self.candidate)
        self.interval_table(self.baseline)
        low, high = self.strength_range
        if not 0.0 <= low <= high <= 1.0:
            raise ConfigurationError(f"invalid strength_range {self.strength_range!r}")
        if self.max_trials is not None and self.max_trials <= 0:
            raise ConfigurationError(f"max_trials must be > 0, got {self.max_trials}")
        if self.deadline_s is not None and self.deadline_s <= 0:
            raise ConfigurationError(f"deadline_s must be > 0, got {self.deadline_s}")
        return self

    def interval_table(self, name: str) -> IntervalTable:
        return get_interval_table(name, self.tables)

    @property
    def algorithms(self) -> Tuple[str, str]:
        return (self.candidate, self.baseline)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["checkpoints"] = list(self.checkpoints)
        data["strength_range"] = list(self.strength_range)
        data["tables"] = {k: list(v) for k, v in self.tables.items()}
        return data


def _as_mapping(cfg: DictConfig | Mapping[str, Any]) -> Dict[str, Any]:
    if isinstance(cfg, DictConfig):
        return OmegaConf.to_container(cfg, resolve=True)  # type: ignore[return-value]
    return dict(cfg)


def load_run_config(cfg: DictConfig | Mapping[str, Any], *, validate: bool = True) -> RunConfig:
    """Build a :class:`RunConfig` from a Hydra config or plain mapping.

    Recognised keys: ``duration_days``, ``sample_size``, ``iterations``,
    ``checkpoints``, ``seed``, ``algorithms.candidate``,
    ``algorithms.baseline``, ``tables``, ``initial_strength.low/high``,
    ``max_trials``, ``deadline_s`` and ``population``. Unknown keys such as
    ``run_id`` or ``outdir`` are left to the caller.
    """

    data = _as_mapping(cfg)
    defaults = RunConfig()
    algorithms = data.get("algorithms") or {}
    strength = data.get("initial_strength") or {}
    checkpoints = data.get("checkpoints")
    if checkpoints is None:
        checkpoints = defaults.checkpoints
    try:
        tables = {
            str(k): tuple(int(o) for o in v) for k, v in (data.get("tables") or {}).items()
        }
        run_cfg = RunConfig(
            duration_days=int(data.get("duration_days", defaults.duration_days)),
            sample_size=int(data.get("sample_size", defaults.sample_size)),
            iterations=int(data.get("iterations", defaults.iterations)),
            checkpoints=tuple(int(d) for d in checkpoints),
            seed=int(data.get("seed", defaults.seed)),
            candidate=str(algorithms.get("candidate", defaults.candidate)),
            baseline=str(algorithms.get("baseline", defaults.baseline)),
            tables=tables,
            strength_range=(
                float(strength.get("low", defaults.strength_range[0])),
                float(strength.get("high", defaults.strength_range[1])),
            ),
            max_trials=None if data.get("max_trials") is None else int(data["max_trials"]),
            deadline_s=None if data.get("deadline_s") is None else float(data["deadline_s"]),
            population=data.get("population"),
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigurationError):
            raise
        raise ConfigurationError(f"malformed run configuration: {exc}") from exc
    return run_cfg.validate() if validate else run_cfg


__all__ = ["DEFAULT_CHECKPOINTS", "RunConfig", "load_run_config"]
