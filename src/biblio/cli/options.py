# ABOUTME: Shared Click options and service setup for Biblio CLI commands.
# ABOUTME: Provides reusable decorators for --library-path and --json.

from pathlib import Path

import click
from rich.console import Console

from biblio.config import DEFAULT_LIBRARY_PATH, BiblioConfig
from biblio.core.index import LibraryIndex
from biblio.core.service import ApiResponse, LibraryService

library_path_option = click.option(
    "--library-path",
    "library_path",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="BIBLIO_LIBRARY_PATH",
    default=None,
    help=f"Directory holding Calibre libraries (default: {DEFAULT_LIBRARY_PATH})",
)

json_option = click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output results as JSON.",
)


def load_service(library_path: Path | None, console: Console) -> LibraryService:
    """Build the index for library_path and return a service over it.

    Exits with status 1 if the library path cannot be scanned.
    """
    config = BiblioConfig(library_path=library_path or DEFAULT_LIBRARY_PATH)
    service = LibraryService(LibraryIndex(config), config=config)
    response = service.refresh()
    if not response.success:
        console.print(f"[red]{response.error}: {config.library_path}[/red]")
        raise SystemExit(1)
    return service


def fail_on_error(response: ApiResponse, console: Console) -> None:
    """Print the response's error and exit with status 1 if it failed."""
    if not response.success:
        console.print(f"[red]{response.error}.[/red]")
        raise SystemExit(1)
