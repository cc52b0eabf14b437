# ABOUTME: The `biblio books` command for listing books in one library.
# ABOUTME: Supports case-insensitive title/author search and format filtering.

import json as json_lib
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from biblio.cli.options import fail_on_error, json_option, library_path_option, load_service

console = Console()


@click.command("books")
@click.argument("library_id")
@click.option("--search", "-s", default=None, help="Match title or author (case-insensitive).")
@click.option(
    "--format",
    "-f",
    "formats",
    multiple=True,
    help="Only books available in this format. Repeatable.",
)
@library_path_option
@json_option
def books(
    library_id: str,
    search: str | None,
    formats: tuple[str, ...],
    library_path: Path | None,
    json_output: bool,
) -> None:
    """List books in a library, newest first."""
    service = load_service(library_path, console)
    response = service.list_books(library_id, search=search, formats=formats)

    if json_output:
        click.echo(json_lib.dumps(response.to_dict(), indent=2))
        if not response.success:
            raise SystemExit(1)
        return

    fail_on_error(response, console)
    records = response.data
    if not records:
        console.print("[yellow]No matching books.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=5)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Series")
    table.add_column("Formats")

    for book in records:
        series_display = ""
        if book.series:
            idx = book.series_index
            series_display = f"{book.series} #{idx:g}" if idx is not None else book.series

        table.add_row(
            str(book.id),
            book.title,
            book.author or "[dim]unknown[/dim]",
            series_display,
            ", ".join(sorted(book.formats)),
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} book(s)[/dim]")
