# ABOUTME: Directory scanner that discovers Calibre library roots.
# ABOUTME: Walks a base directory to a bounded depth and derives a stable id per library.

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from biblio.config import BiblioConfig
from biblio.db.catalog import CatalogError, CatalogReader

logger = logging.getLogger(__name__)


class ScanIoError(Exception):
    """Raised when the base directory of a scan cannot be walked."""


@dataclass(frozen=True)
class Library:
    """A discovered library root and its catalog location."""

    id: str
    name: str
    root_path: Path
    catalog_path: Path
    book_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": str(self.root_path),
            "metadata_db_path": str(self.catalog_path),
            "book_count": self.book_count,
        }


def library_id(root: Path) -> str:
    """Derive a stable identifier from a library's absolute path.

    Uses a name-based UUID (v5) so the same location always maps to the same
    id across restarts without storing anything on disk.
    """
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, str(root.absolute())))


def _walk_dirs(root: Path, max_depth: int) -> Iterator[Path]:
    """Yield root and its subdirectories down to max_depth, in sorted order.

    Symlinked directories are yielded as candidates but never descended into.
    Unreadable subdirectories are logged and skipped.
    """
    stack: list[tuple[Path, int]] = [(root, 0)]
    while stack:
        directory, depth = stack.pop()
        yield directory
        if depth >= max_depth or (depth > 0 and directory.is_symlink()):
            continue
        try:
            children = sorted(child for child in directory.iterdir() if child.is_dir())
        except OSError as exc:
            logger.warning("Skipping unreadable directory %s: %s", directory, exc)
            continue
        stack.extend((child, depth + 1) for child in reversed(children))


class LibraryScanner:
    """Finds library roots below the configured base directory.

    A directory is a library root when it directly contains the catalog file
    (metadata.db by default).
    """

    def __init__(self, config: BiblioConfig) -> None:
        self._config = config

    def scan(self) -> list[Library]:
        """Walk the base directory and describe every library found.

        Candidates whose catalog cannot be opened or counted are skipped with a
        warning.

        Returns:
            Libraries sorted by name.

        Raises:
            ScanIoError: If the base directory is missing or unreadable.
        """
        base = self._config.library_path
        if not base.is_dir():
            raise ScanIoError(f"Library path is not a directory: {base}")
        try:
            next(base.iterdir(), None)
        except OSError as exc:
            raise ScanIoError(f"Cannot read library path {base}: {exc}") from exc

        libraries: list[Library] = []
        for directory in _walk_dirs(base, self._config.max_scan_depth):
            catalog_path = directory / self._config.catalog_filename
            if not catalog_path.is_file():
                continue
            library = self._describe(directory, catalog_path)
            if library is not None:
                libraries.append(library)

        libraries.sort(key=lambda lib: (lib.name, str(lib.root_path)))
        return libraries

    def _describe(self, root: Path, catalog_path: Path) -> Library | None:
        """Build a Library for a candidate root, or None if its catalog is unusable."""
        try:
            with CatalogReader.open(catalog_path) as reader:
                book_count = reader.count_books()
        except CatalogError as exc:
            logger.warning("Skipping library at %s: %s", root, exc)
            return None

        absolute_root = root.absolute()
        return Library(
            id=library_id(absolute_root),
            name=absolute_root.name,
            root_path=absolute_root,
            catalog_path=catalog_path.absolute(),
            book_count=book_count,
        )
