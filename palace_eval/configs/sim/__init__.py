"""Retention simulation configs: ``default`` and ``smoke``."""
