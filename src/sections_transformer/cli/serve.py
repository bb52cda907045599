"""
CLI: ``sections-transformer serve``: start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from sections_transformer.cli.utils import console
from sections_transformer.core.settings import SectionsSettings

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: SECTIONS_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: SECTIONS_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the sections transformer REST API."""
    settings = SectionsSettings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting sections-transformer[/bold green] on {host}:{port}")
    uvicorn.run(
        "sections_transformer.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )
