"""Preview upcoming fire times for a schedule."""

from datetime import UTC, datetime
from typing import Annotated

import typer
from rich.markup import escape

from cadence.cli.console import console, dim, error


def _format_countdown(next_fire: datetime) -> str:
    """Format a countdown string for a fire time."""
    total_seconds = int((next_fire - datetime.now(UTC)).total_seconds())
    if total_seconds <= 0:
        return "[green]now[/green]"
    if total_seconds < 60:
        return f"in {total_seconds}s"

    total_minutes = total_seconds // 60
    if total_minutes < 60:
        return f"in {total_minutes}m"

    hours, minutes = divmod(total_minutes, 60)
    if hours < 24:
        return f"in {hours}h {minutes}m" if minutes else f"in {hours}h"

    days, hours = divmod(hours, 24)
    return f"in {days}d {hours}h" if hours else f"in {days}d"


def register(app: typer.Typer) -> None:
    """Register the next command (schedule preview)."""

    @app.command("next")
    def next_(
        schedule: Annotated[
            str,
            typer.Argument(help='Schedule string, e.g. "*/5 * * * * * @ 30"'),
        ],
        count: Annotated[
            int,
            typer.Option("--count", "-n", min=1, help="Number of fire times to show"),
        ] = 5,
        timezone: Annotated[
            str,
            typer.Option("--timezone", "-z", help="IANA timezone for the pattern"),
        ] = "UTC",
    ) -> None:
        """Show the next fire times of a schedule.

        Examples:
            cadence next "0 */15 * * * *"
            cadence next "0 0 9 * * 1-5 @ 3600" --count 3 --timezone Europe/Berlin
        """
        from rich.table import Table

        from cadence.scheduling import (
            InvalidSpecification,
            TriggerStartFailure,
            next_fire_times,
            parse_schedule,
        )

        try:
            spec = parse_schedule(schedule)
            fire_times = next_fire_times(spec.pattern, count, timezone=timezone)
        except (InvalidSpecification, TriggerStartFailure) as e:
            error(escape(str(e)))
            raise typer.Exit(1) from None

        table = Table(show_header=True)
        table.add_column("#", style="dim")
        table.add_column("Fire Time")
        table.add_column("Countdown")

        for i, fire_time in enumerate(fire_times, start=1):
            table.add_row(
                str(i),
                fire_time.strftime("%Y-%m-%d %H:%M:%S %Z"),
                _format_countdown(fire_time),
            )

        console.print(f"Pattern: [bold]{escape(spec.pattern)}[/bold]")
        console.print(table)
        if spec.cooldown_seconds:
            dim(f"Cooldown: {spec.cooldown_seconds} seconds between passes")
