"""
Root Typer application for the sections-transformer CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from sections_transformer.cli.sections import app as sections_app
from sections_transformer.cli.serve import app as serve_app
from sections_transformer.core.logging import configure_logging

app = Typer(
    name="sections-transformer",
    help="sections-transformer: serve the TME Sections taxonomy.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from sections_transformer import __version__

        typer.echo(f"sections-transformer {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for CLI commands"),
) -> None:
    """sections-transformer CLI: run the server or query TME directly."""
    configure_logging(level=log_level, json_format=False)


app.add_typer(serve_app, name="serve", help="Start the API server.")
app.add_typer(sections_app, name="sections", help="Fetch sections from the taxonomy source.")
