"""Run identifier helpers."""

import re
from datetime import datetime, timezone

SLUG_RE = re.compile(r"^[A-Za-z0-9._-]{3,64}$")


def validate_run_id(value: str) -> str:
    """Validate a run identifier slug.

    Parameters
    ----------
    value: str
        Candidate run id, used as a directory name under ``runs/``.

    Returns
    -------
    str
        The original value if it is a valid slug.

    Raises
    ------
    TypeError
        If ``value`` is not a string.
    ValueError
        If ``value`` contains invalid characters or length.
    """
    if not isinstance(value, str):
        raise TypeError("run_id must be a string")
    if not SLUG_RE.fullmatch(value):
        raise ValueError("Invalid run_id. Use 3–64 chars from [A-Za-z0-9._-].")
    return value


def default_run_id(now: datetime | None = None) -> str:
    """Return a timestamp run id such as ``20250101_1200``."""

    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d_%H%M")
