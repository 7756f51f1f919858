"""Centralized logging configuration for Cadence.

Entry points (the CLI) call configure_logging() once at startup. Library
modules only ever use ``logging.getLogger(__name__)``.

Logging Levels:
- DEBUG: Trigger start/stop, subprocess lifecycle
- INFO: Scheduler status (pass banners, task progress, skips), command stdout
- WARNING: Command stderr, invalid timezones
- ERROR: Failed tasks, failed trigger callbacks
"""

import logging
import os

ENV_VAR = "CADENCE_LOG_LEVEL"

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    - cadence.scheduling.scheduler -> scheduling
    - cadence.cli.commands.run -> cli
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "cadence":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return super().format(record)


def resolve_level(level: str | None = None) -> int:
    """Resolve a level name, falling back to CADENCE_LOG_LEVEL then INFO."""
    if level is None:
        level = os.environ.get(ENV_VAR, "INFO")
    level = level.upper()
    if level not in LEVELS:
        level = "INFO"
    return getattr(logging, level)


def configure_logging(level: str | None = None, use_rich: bool = False) -> None:
    """Configure logging for Cadence.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses CADENCE_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful output.
    """
    log_level = resolve_level(level)

    if use_rich:
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        force=True,
    )

    # asyncio debug chatter is not useful for a task runner
    logging.getLogger("asyncio").setLevel(logging.WARNING)
