"""Main CLI application."""

import typer

from cadence.cli.commands import preview, run

app = typer.Typer(
    name="cadence",
    help="Cadence - recurring task runner",
    no_args_is_help=True,
)

run.register(app)
preview.register(app)


if __name__ == "__main__":
    app()
