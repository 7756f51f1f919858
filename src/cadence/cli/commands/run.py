"""Run configured commands on a schedule."""

import asyncio
import logging
import signal
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer
from rich.markup import escape

from cadence.cli.console import dim, error

if TYPE_CHECKING:
    from cadence.scheduling import TaskScheduler

logger = logging.getLogger(__name__)


async def _serve(scheduler: "TaskScheduler") -> None:
    """Run the scheduler until SIGINT/SIGTERM in scheduled mode."""
    await scheduler.run()
    if not scheduler.is_scheduled:
        return

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        scheduler.stop()


def register(app: typer.Typer) -> None:
    """Register the run command."""

    @app.command()
    def run(
        commands: Annotated[
            list[str] | None,
            typer.Argument(help="Shell commands to run, in order, on every pass"),
        ] = None,
        config: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
        schedule: Annotated[
            str | None,
            typer.Option(
                "--schedule",
                "-s",
                help='Schedule string: "<sec> <min> <hour> <dom> <mon> <dow> [@ <cooldown>]"',
            ),
        ] = None,
        cooldown: Annotated[
            int | None,
            typer.Option(
                "--cooldown",
                min=0,
                help="Cooldown seconds when the schedule has no @ suffix",
            ),
        ] = None,
        immediate_env: Annotated[
            str | None,
            typer.Option(
                "--immediate-env",
                help="Run a single pass right away when this env var is set",
            ),
        ] = None,
        timezone: Annotated[
            str | None,
            typer.Option("--timezone", "-z", help="IANA timezone for the pattern"),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
        ] = None,
        rich: Annotated[
            bool,
            typer.Option("--rich", help="Colorful log output"),
        ] = False,
    ) -> None:
        """Run shell commands on a recurring schedule.

        Commands come from the config file ([[tasks]]) followed by any given
        on the command line.

        Examples:
            cadence run -s "0 */10 * * * * @ 300" "./bin/sync" "./bin/report"
            RUN_NOW=1 cadence run --immediate-env RUN_NOW -c cadence.toml
        """
        from cadence.config import ConfigError, build_scheduler, validate_config
        from cadence.config.loader import (
            apply_env_overrides,
            find_config_path,
            load_config,
        )
        from cadence.logging import configure_logging
        from cadence.scheduling import InvalidSpecification, TriggerStartFailure

        configure_logging(log_level, use_rich=rich)

        try:
            config_path = find_config_path(config)
            raw: dict[str, Any] = (
                load_config(config_path).model_dump()
                if config_path
                else apply_env_overrides({})
            )
        except (FileNotFoundError, ConfigError) as e:
            error(escape(str(e)))
            raise typer.Exit(1) from None

        overrides = {
            "schedule": schedule,
            "backup_cooldown_seconds": cooldown,
            "immediate_env_name": immediate_env,
            "timezone": timezone,
        }
        raw.update({k: v for k, v in overrides.items() if v is not None})
        raw["tasks"] = [
            *raw.get("tasks", []),
            *({"command": c} for c in commands or []),
        ]

        try:
            cadence_config = validate_config(raw)
        except ConfigError as e:
            error(f"Configuration validation failed: {escape(str(e))}")
            raise typer.Exit(1) from None

        if not cadence_config.tasks:
            error("No tasks configured. Pass commands or add [[tasks]] to the config.")
            raise typer.Exit(1)

        if config_path:
            dim(f"Using config {config_path}")

        try:
            scheduler = build_scheduler(cadence_config)
            asyncio.run(_serve(scheduler))
        except (InvalidSpecification, TriggerStartFailure) as e:
            error(escape(str(e)))
            raise typer.Exit(1) from None
        except KeyboardInterrupt:
            logger.info("interrupted")
