# ABOUTME: The `biblio formats`, `biblio cover`, and `biblio get` commands.
# ABOUTME: List a book's formats and copy its cover or a format file out of the library.

import json as json_lib
from pathlib import Path

import click
from rich.console import Console

from biblio.cli.options import fail_on_error, json_option, library_path_option, load_service

console = Console()


@click.command("formats")
@click.argument("library_id")
@click.argument("book_id", type=int)
@library_path_option
@json_option
def formats(library_id: str, book_id: int, library_path: Path | None, json_output: bool) -> None:
    """List the formats a book is available in."""
    service = load_service(library_path, console)
    response = service.list_book_formats(library_id, book_id)

    if json_output:
        click.echo(json_lib.dumps(response.to_dict(), indent=2))
        if not response.success:
            raise SystemExit(1)
        return

    fail_on_error(response, console)
    if not response.data:
        console.print(f"[yellow]Book {book_id} has no formats.[/yellow]")
        return
    for fmt in response.data:
        console.print(fmt)


@click.command("cover")
@click.argument("library_id")
@click.argument("book_id", type=int)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="File to write the cover image to.",
)
@library_path_option
def cover(library_id: str, book_id: int, output_path: Path, library_path: Path | None) -> None:
    """Save a book's cover image."""
    service = load_service(library_path, console)
    response = service.get_cover(library_id, book_id)
    fail_on_error(response, console)

    artifact = response.data
    output_path.write_bytes(artifact.data)
    console.print(f"Saved cover ({artifact.content_type}) to [bold]{output_path}[/bold].")


@click.command("get")
@click.argument("library_id")
@click.argument("book_id", type=int)
@click.argument("book_format")
@click.option(
    "--output-dir",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to copy the file into (default: current directory).",
)
@library_path_option
def get(
    library_id: str,
    book_id: int,
    book_format: str,
    output_dir: Path,
    library_path: Path | None,
) -> None:
    """Copy a book's file in the given format out of the library."""
    service = load_service(library_path, console)
    response = service.get_book_file(library_id, book_id, book_format)
    fail_on_error(response, console)

    artifact = response.data
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / artifact.filename
    target.write_bytes(artifact.data)
    console.print(f"Saved [bold]{artifact.filename}[/bold] ({artifact.content_type}) to {output_dir}.")
