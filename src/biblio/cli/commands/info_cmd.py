# ABOUTME: The `biblio info` command for displaying detailed book metadata.
# ABOUTME: Shows all catalog fields for a single book by library id and book id.

import json as json_lib
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from biblio.cli.options import fail_on_error, json_option, library_path_option, load_service

console = Console()


@click.command("info")
@click.argument("library_id")
@click.argument("book_id", type=int)
@library_path_option
@json_option
def info(library_id: str, book_id: int, library_path: Path | None, json_output: bool) -> None:
    """Show detailed metadata for a book."""
    service = load_service(library_path, console)
    response = service.get_book(library_id, book_id)

    if json_output:
        click.echo(json_lib.dumps(response.to_dict(), indent=2))
        if not response.success:
            raise SystemExit(1)
        return

    fail_on_error(response, console)
    book = response.data

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("ID", str(book.id))
    table.add_row("Title", book.title)
    table.add_row("Author", book.author or "unknown")
    if book.sort_key:
        table.add_row("Sort", book.sort_key)
    if book.series:
        idx = book.series_index
        series_str = f"{book.series} #{idx:g}" if idx is not None else book.series
        table.add_row("Series", series_str)
    if book.tags:
        table.add_row("Tags", ", ".join(sorted(book.tags)))
    if book.publisher:
        table.add_row("Publisher", book.publisher)
    if book.pubdate:
        table.add_row("Published", book.pubdate)
    if book.languages:
        table.add_row("Languages", ", ".join(book.languages))
    if book.rating is not None:
        table.add_row("Rating", f"{book.rating / 2:g}/5")
    table.add_row("Formats", ", ".join(sorted(book.formats)) or "none")
    table.add_row("Cover", "yes" if book.has_cover else "no")
    if book.timestamp:
        table.add_row("Added", book.timestamp)
    if book.comments:
        table.add_row("Comments", book.comments)

    console.print(table)
