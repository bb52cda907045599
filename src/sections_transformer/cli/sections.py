"""
CLI: ``sections-transformer sections``: fetch and inspect sections directly
from the taxonomy source, without running the server.
"""

from __future__ import annotations

import typer

from sections_transformer.cli.utils import console, err_console, load_store, output_sections

app = typer.Typer(no_args_is_help=True)


@app.command("fetch")
def fetch(
    taxonomy: str | None = typer.Option(None, "--taxonomy", "-t", help="Taxonomy name"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Fetch and transform every section."""
    store = load_store(taxonomy)
    sections, _ = store.get_all()
    output_sections(sections, as_json=json_out, title=f"{store.taxonomy_name} ({len(sections)})")


@app.command("get")
def get(
    uuid: str = typer.Argument(..., help="Section UUID"),
    taxonomy: str | None = typer.Option(None, "--taxonomy", "-t", help="Taxonomy name"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show one section by UUID."""
    store = load_store(taxonomy)
    section, found = store.get_by_uuid(uuid)
    if not found:
        err_console.print(f"[bold red]Not found[/bold red]: {uuid}")
        raise typer.Exit(code=1)
    output_sections([section], as_json=json_out)


@app.command("count")
def count(
    taxonomy: str | None = typer.Option(None, "--taxonomy", "-t", help="Taxonomy name"),
) -> None:
    """Print the number of sections."""
    store = load_store(taxonomy)
    console.print(store.get_count())
