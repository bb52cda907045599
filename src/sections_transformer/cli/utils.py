"""
CLI utility helpers: output formatting and store construction.
"""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.table import Table

from sections_transformer.core.errors import TransformerError
from sections_transformer.core.models import Section
from sections_transformer.core.settings import SectionsSettings
from sections_transformer.core.store import SectionStore

console = Console()
err_console = Console(stderr=True)


def make_store(taxonomy: str | None = None) -> SectionStore:
    """Build a store over the TME source configured in the environment."""
    from sections_transformer.api.app import build_source

    settings = SectionsSettings()
    if taxonomy:
        settings = settings.model_copy(update={"taxonomy_name": taxonomy})
    try:
        source = build_source(settings)
    except TransformerError as exc:
        fail(exc)
    return SectionStore(source, settings.taxonomy_name)


def load_store(taxonomy: str | None = None) -> SectionStore:
    """Build a store and load it once, exiting non-zero on failure."""
    store = make_store(taxonomy)
    try:
        store.reload()
    except TransformerError as exc:
        fail(exc)
    return store


def fail(exc: TransformerError) -> None:
    """Print a service error and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {exc.message}")
    raise typer.Exit(code=1)


def output_sections(sections: list[Section], *, as_json: bool = False, title: str = "") -> None:
    """Render sections as JSON or a Rich table."""
    if as_json:
        console.print_json(json.dumps([s.to_dict() for s in sections]))
        return

    if not sections:
        console.print("[dim]No sections.[/dim]")
        return

    table = Table(title=title or None, show_lines=False, pad_edge=False)
    table.add_column("uuid", overflow="fold")
    table.add_column("prefLabel", overflow="fold")
    table.add_column("TME", overflow="fold")
    for section in sections:
        table.add_row(
            section.uuid,
            section.pref_label,
            ", ".join(section.alternative_identifiers.tme),
        )
    console.print(table)
