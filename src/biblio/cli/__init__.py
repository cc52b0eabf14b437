# ABOUTME: CLI package for Biblio, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from biblio.cli.commands import books_cmd, browse_cmd, files_cmd, info_cmd, libraries_cmd


def _configure_logging(verbose: bool) -> None:
    """Route log records through Rich on stderr. DEBUG when verbose, else ERROR."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="biblio")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Biblio - browse Calibre libraries and fetch their books."""
    _configure_logging(verbose)


cli.add_command(libraries_cmd.libraries)
cli.add_command(books_cmd.books)
cli.add_command(info_cmd.info)
cli.add_command(browse_cmd.authors)
cli.add_command(browse_cmd.tags)
cli.add_command(browse_cmd.series)
cli.add_command(files_cmd.formats)
cli.add_command(files_cmd.cover)
cli.add_command(files_cmd.get)
