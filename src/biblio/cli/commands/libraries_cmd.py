# ABOUTME: The `biblio libraries` command for listing discovered libraries.
# ABOUTME: Scans the library path and shows each library's id, name, and book count.

import json as json_lib
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from biblio.cli.options import json_option, library_path_option, load_service

console = Console()


@click.command("libraries")
@library_path_option
@json_option
def libraries(library_path: Path | None, json_output: bool) -> None:
    """List Calibre libraries found under the library path."""
    service = load_service(library_path, console)
    response = service.list_libraries()

    if json_output:
        click.echo(json_lib.dumps(response.to_dict(), indent=2))
        return

    if not response.data:
        console.print("[yellow]No libraries found.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Books", justify="right")
    table.add_column("Path", overflow="fold")

    for library in response.data:
        table.add_row(library.id, library.name, str(library.book_count), str(library.root_path))

    console.print(table)
    console.print(f"\n[dim]{len(response.data)} library(ies)[/dim]")
