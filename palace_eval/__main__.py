# Copyright (c) 2025 Arne Deutsch, itemis AG, MIT License
"""CLI entry point so ``python -m palace_eval`` works."""

from .cli import cli

if __name__ == "__main__":  # pragma: no cover - CLI stub
    cli()
