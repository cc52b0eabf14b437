# ABOUTME: Read-only SQLite connection management for Calibre catalogs.
# ABOUTME: Opens metadata.db without write access and verifies it is a database.

import sqlite3
from pathlib import Path


def _catalog_uri(path: Path) -> str:
    """Build a SQLite URI that opens the file read-only."""
    return f"{path.absolute().as_uri()}?mode=ro"


def open_catalog(path: Path) -> sqlite3.Connection:
    """Open a Calibre catalog read-only.

    The connection is created with check_same_thread=False because it is shared
    between request threads; callers serialize access themselves. Rows are
    returned as sqlite3.Row for name-based column access.

    Args:
        path: Path to the metadata.db file.

    Returns:
        A configured read-only sqlite3.Connection.

    Raises:
        sqlite3.Error: If the file is missing or is not a SQLite database.
    """
    conn = sqlite3.connect(_catalog_uri(path), uri=True, check_same_thread=False)
    try:
        conn.row_factory = sqlite3.Row
        # Reading the schema version forces SQLite to parse the file header.
        conn.execute("PRAGMA schema_version").fetchone()
    except sqlite3.Error:
        conn.close()
        raise
    return conn
