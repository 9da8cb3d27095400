from .ids import SLUG_RE, default_run_id, validate_run_id

__all__ = ["SLUG_RE", "default_run_id", "validate_run_id"]
