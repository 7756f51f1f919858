"""CLI command modules."""

from cadence.cli.commands import preview, run

__all__ = [
    "preview",
    "run",
]
