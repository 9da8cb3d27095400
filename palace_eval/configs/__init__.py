"""Hydra configuration packages."""
