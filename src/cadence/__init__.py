"""Cadence - recurring task runner with overlap and cooldown guards."""

__version__ = "0.1.0"
