# ABOUTME: In-memory index of discovered libraries and their open catalog readers.
# ABOUTME: Serves lookups by library id and supports atomic clear and rebuild.

import logging
import sqlite3
import threading
from pathlib import Path

from biblio.config import BiblioConfig
from biblio.core.scanner import Library, LibraryScanner
from biblio.db.catalog import CatalogError, CatalogReader

logger = logging.getLogger(__name__)


class LibraryIndex:
    """Owns the library metadata map and the catalog handle map.

    Both maps are only ever changed together while holding the lock, so every
    library listed has an open reader and every reader belongs to a listed
    library. Reads take the same lock. The lock is reentrant so callers can
    hold it across a lookup and the catalog queries that follow.
    """

    def __init__(self, config: BiblioConfig) -> None:
        self._config = config
        self._libraries: dict[str, Library] = {}
        self._catalogs: dict[str, CatalogReader] = {}
        self.lock = threading.RLock()

    def __len__(self) -> int:
        with self.lock:
            return len(self._libraries)

    def __contains__(self, library_id: object) -> bool:
        with self.lock:
            return library_id in self._libraries

    def lookup_library(self, library_id: str) -> Library | None:
        with self.lock:
            return self._libraries.get(library_id)

    def lookup_catalog(self, library_id: str) -> CatalogReader | None:
        with self.lock:
            return self._catalogs.get(library_id)

    def list_libraries(self) -> list[Library]:
        """All indexed libraries, sorted by name."""
        with self.lock:
            return sorted(self._libraries.values(), key=lambda lib: (lib.name, str(lib.root_path)))

    def clear(self) -> None:
        """Close every catalog reader and forget all libraries."""
        with self.lock:
            for library_id, reader in self._catalogs.items():
                try:
                    reader.close()
                except sqlite3.Error as exc:
                    logger.warning("Error closing catalog for library %s: %s", library_id, exc)
            self._catalogs = {}
            self._libraries = {}

    def rebuild(self, base_path: Path | None = None) -> list[Library]:
        """Discard all entries and repopulate from a fresh scan.

        Libraries whose catalog fails to open are logged and left out.

        Args:
            base_path: Directory to scan. Defaults to the configured library path.

        Returns:
            The newly indexed libraries, sorted by name.

        Raises:
            ScanIoError: If the base directory cannot be walked. The index is
                left empty in that case.
        """
        config = self._config if base_path is None else self._config.with_library_path(base_path)
        with self.lock:
            self.clear()
            libraries: dict[str, Library] = {}
            catalogs: dict[str, CatalogReader] = {}
            for library in LibraryScanner(config).scan():
                try:
                    reader = CatalogReader.open(library.catalog_path)
                except CatalogError as exc:
                    logger.error("Dropping library %s (%s): %s", library.name, library.root_path, exc)
                    continue
                stale = catalogs.pop(library.id, None)
                if stale is not None:
                    stale.close()
                catalogs[library.id] = reader
                libraries[library.id] = library

            self._libraries = libraries
            self._catalogs = catalogs
            logger.info("Indexed %d library(ies) under %s", len(libraries), config.library_path)
            return self.list_libraries()
