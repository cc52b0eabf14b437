# ABOUTME: Runtime configuration for Biblio, built once at startup.
# ABOUTME: Passed explicitly to the scanner, index, and service layers.

from dataclasses import dataclass, replace
from pathlib import Path

CATALOG_FILENAME = "metadata.db"
DEFAULT_LIBRARY_PATH = Path.home() / "Calibre Libraries"
DEFAULT_MAX_SCAN_DEPTH = 2


@dataclass(frozen=True)
class BiblioConfig:
    """Where to look for Calibre libraries and how deep to search.

    Attributes:
        library_path: Base directory holding zero or more library roots.
        max_scan_depth: How many directory levels below library_path to search.
            Depth 0 is library_path itself.
        catalog_filename: Name of the catalog file that marks a library root.
    """

    library_path: Path = DEFAULT_LIBRARY_PATH
    max_scan_depth: int = DEFAULT_MAX_SCAN_DEPTH
    catalog_filename: str = CATALOG_FILENAME

    def with_library_path(self, path: Path) -> "BiblioConfig":
        """Return a copy of this config pointing at a different base directory."""
        return replace(self, library_path=path)
