"""Packaged configuration resources (default_tuning.yaml)."""
