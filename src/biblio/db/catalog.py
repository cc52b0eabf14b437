# ABOUTME: Read-only queries over a Calibre catalog (metadata.db).
# ABOUTME: Rebuilds books, authors, tags, and series from the relational link tables.

import logging
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from biblio.db.connection import open_catalog
from biblio.db.mapping import (
    Author,
    Book,
    Series,
    Tag,
    normalize_format,
    row_to_author,
    row_to_series,
    row_to_tag,
)

logger = logging.getLogger(__name__)

MAX_BOOKS = 10_000

T = TypeVar("T")

_BOOK_COLUMNS = "id, title, has_cover, sort, timestamp, pubdate"


class CatalogError(Exception):
    """Raised when a primary query against a catalog fails."""


class CatalogReader:
    """Wraps one read-only catalog connection and reconstructs its entities.

    Top-level statement failures raise CatalogError. The per-book sub-queries
    (authors, series, tags, formats, comments, publisher, rating, languages)
    are best-effort: a failure leaves that field empty instead of hiding the
    whole book.
    """

    def __init__(self, conn: sqlite3.Connection, path: Path | None = None) -> None:
        self._conn = conn
        self.path = path

    @classmethod
    def open(cls, path: Path) -> "CatalogReader":
        """Open the catalog at path read-only.

        Raises:
            CatalogError: If the file cannot be opened as a SQLite database.
        """
        try:
            conn = open_catalog(path)
        except sqlite3.Error as exc:
            raise CatalogError(f"Cannot open catalog {path}: {exc}") from exc
        return cls(conn, path)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "CatalogReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Books ---

    def list_books(self) -> list[Book]:
        """Return books newest first, capped at MAX_BOOKS."""
        rows = self._fetchall(
            f"SELECT {_BOOK_COLUMNS} FROM books ORDER BY timestamp DESC LIMIT ?",
            (MAX_BOOKS,),
        )
        return [self._build_book(row) for row in rows]

    def get_book(self, book_id: int) -> Book | None:
        """Return a single book by its catalog id, or None if it does not exist."""
        rows = self._fetchall(
            f"SELECT {_BOOK_COLUMNS} FROM books WHERE id = ?",
            (book_id,),
        )
        return self._build_book(rows[0]) if rows else None

    def count_books(self) -> int:
        """Number of books list_books() would return."""
        rows = self._fetchall(
            "SELECT COUNT(*) FROM (SELECT id FROM books LIMIT ?)",
            (MAX_BOOKS,),
        )
        return rows[0][0]

    def list_book_formats(self, book_id: int) -> list[str]:
        """Available formats for a book, uppercase and alphabetically sorted."""
        rows = self._fetchall("SELECT format FROM data WHERE book = ?", (book_id,))
        return sorted({normalize_format(row["format"]) for row in rows if row["format"]})

    # --- Aggregates ---

    def list_authors(self) -> list[Author]:
        """All authors with book counts, ordered by sort key."""
        rows = self._fetchall(
            "SELECT a.id, a.name, a.sort, COUNT(bal.book) AS book_count "
            "FROM authors a "
            "LEFT JOIN books_authors_link bal ON a.id = bal.author "
            "GROUP BY a.id, a.name, a.sort "
            "ORDER BY a.sort"
        )
        return [row_to_author(row) for row in rows]

    def list_tags(self) -> list[Tag]:
        """All tags with book counts, ordered by name."""
        rows = self._fetchall(
            "SELECT t.id, t.name, COUNT(btl.book) AS book_count "
            "FROM tags t "
            "LEFT JOIN books_tags_link btl ON t.id = btl.tag "
            "GROUP BY t.id, t.name "
            "ORDER BY t.name"
        )
        return [row_to_tag(row) for row in rows]

    def list_series(self) -> list[Series]:
        """All series with book counts, ordered by sort key."""
        rows = self._fetchall(
            "SELECT s.id, s.name, s.sort, COUNT(bsl.book) AS book_count "
            "FROM series s "
            "LEFT JOIN books_series_link bsl ON s.id = bsl.series "
            "GROUP BY s.id, s.name, s.sort "
            "ORDER BY s.sort"
        )
        return [row_to_series(row) for row in rows]

    # --- Internals ---

    def _fetchall(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise CatalogError(f"Database error: {exc}") from exc

    def _best_effort(self, field: str, book_id: int, fetch: Callable[[int], T], default: T) -> T:
        """Run a per-book sub-query, falling back to default on any database error."""
        try:
            return fetch(book_id)
        except sqlite3.Error as exc:
            logger.debug("Sub-query for %s of book %d failed: %s", field, book_id, exc)
            return default

    def _build_book(self, row: sqlite3.Row) -> Book:
        book_id = row["id"]
        series, series_index = self._best_effort("series", book_id, self._series_for, (None, None))
        return Book(
            id=book_id,
            title=row["title"],
            authors=self._best_effort("authors", book_id, self._authors_for, []),
            series=series,
            series_index=series_index,
            tags=self._best_effort("tags", book_id, self._tags_for, set()),
            comments=self._best_effort("comments", book_id, self._comments_for, None),
            has_cover=bool(row["has_cover"]),
            formats=self._best_effort("formats", book_id, self._formats_for, set()),
            sort_key=row["sort"],
            publisher=self._best_effort("publisher", book_id, self._publisher_for, None),
            pubdate=row["pubdate"],
            timestamp=row["timestamp"],
            rating=self._best_effort("rating", book_id, self._rating_for, None),
            languages=self._best_effort("languages", book_id, self._languages_for, []),
        )

    def _authors_for(self, book_id: int) -> list[str]:
        cursor = self._conn.execute(
            "SELECT a.name FROM authors a "
            "JOIN books_authors_link bal ON a.id = bal.author "
            "WHERE bal.book = ? "
            "ORDER BY bal.id",
            (book_id,),
        )
        return [row[0] for row in cursor.fetchall()]

    def _series_for(self, book_id: int) -> tuple[str | None, float | None]:
        cursor = self._conn.execute(
            "SELECT s.name, b.series_index FROM series s "
            "JOIN books_series_link bsl ON s.id = bsl.series "
            "JOIN books b ON bsl.book = b.id "
            "WHERE bsl.book = ?",
            (book_id,),
        )
        row = cursor.fetchone()
        if row is None:
            return None, None
        index = row[1]
        return row[0], float(index) if index is not None else None

    def _tags_for(self, book_id: int) -> set[str]:
        cursor = self._conn.execute(
            "SELECT t.name FROM tags t "
            "JOIN books_tags_link btl ON t.id = btl.tag "
            "WHERE btl.book = ?",
            (book_id,),
        )
        return {row[0] for row in cursor.fetchall()}

    def _formats_for(self, book_id: int) -> set[str]:
        cursor = self._conn.execute("SELECT format FROM data WHERE book = ?", (book_id,))
        return {normalize_format(row[0]) for row in cursor.fetchall() if row[0]}

    def _comments_for(self, book_id: int) -> str | None:
        cursor = self._conn.execute("SELECT text FROM comments WHERE book = ?", (book_id,))
        row = cursor.fetchone()
        return row[0] if row else None

    def _publisher_for(self, book_id: int) -> str | None:
        cursor = self._conn.execute(
            "SELECT p.name FROM publishers p "
            "JOIN books_publishers_link bpl ON p.id = bpl.publisher "
            "WHERE bpl.book = ?",
            (book_id,),
        )
        row = cursor.fetchone()
        return row[0] if row else None

    def _rating_for(self, book_id: int) -> int | None:
        cursor = self._conn.execute(
            "SELECT r.rating FROM ratings r "
            "JOIN books_ratings_link brl ON r.id = brl.rating "
            "WHERE brl.book = ?",
            (book_id,),
        )
        row = cursor.fetchone()
        return row[0] if row else None

    def _languages_for(self, book_id: int) -> list[str]:
        cursor = self._conn.execute(
            "SELECT l.lang_code FROM languages l "
            "JOIN books_languages_link bll ON l.id = bll.lang_code "
            "WHERE bll.book = ? "
            "ORDER BY bll.item_order",
            (book_id,),
        )
        return [row[0] for row in cursor.fetchall()]
