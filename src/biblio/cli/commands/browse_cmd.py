# ABOUTME: The `biblio authors`, `biblio tags`, and `biblio series` commands.
# ABOUTME: List a library's authors, tags, or series with their book counts.

import json as json_lib
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from biblio.cli.options import fail_on_error, json_option, library_path_option, load_service
from biblio.core.service import ApiResponse

console = Console()


def _print_counts(response: ApiResponse, label: str, json_output: bool) -> None:
    """Render a list of named entries with book counts."""
    if json_output:
        click.echo(json_lib.dumps(response.to_dict(), indent=2))
        if not response.success:
            raise SystemExit(1)
        return

    fail_on_error(response, console)
    if not response.data:
        console.print(f"[yellow]No {label.lower()} in the library.[/yellow]")
        return

    table = Table()
    table.add_column(label, style="cyan")
    table.add_column("Books", style="dim", justify="right")

    for entry in response.data:
        table.add_row(entry.name, str(entry.book_count))

    console.print(table)


@click.command("authors")
@click.argument("library_id")
@library_path_option
@json_option
def authors(library_id: str, library_path: Path | None, json_output: bool) -> None:
    """List authors with book counts."""
    service = load_service(library_path, console)
    _print_counts(service.list_authors(library_id), "Authors", json_output)


@click.command("tags")
@click.argument("library_id")
@library_path_option
@json_option
def tags(library_id: str, library_path: Path | None, json_output: bool) -> None:
    """List tags with book counts."""
    service = load_service(library_path, console)
    _print_counts(service.list_tags(library_id), "Tags", json_output)


@click.command("series")
@click.argument("library_id")
@library_path_option
@json_option
def series(library_id: str, library_path: Path | None, json_output: bool) -> None:
    """List series with book counts."""
    service = load_service(library_path, console)
    _print_counts(service.list_series(library_id), "Series", json_output)
