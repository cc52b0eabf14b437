# ABOUTME: Entity dataclasses reconstructed from the Calibre catalog schema.
# ABOUTME: Converts sqlite3 rows to Book, Author, Tag, and Series and back to plain dicts.

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Book:
    """A book reconstructed from the books table and its link tables.

    The id is the catalog's own primary key, so it is only unique within one
    library. Formats are uppercase extension names such as "EPUB".
    """

    id: int
    title: str
    authors: list[str] = field(default_factory=list)
    series: str | None = None
    series_index: float | None = None
    tags: set[str] = field(default_factory=set)
    comments: str | None = None
    has_cover: bool = False
    formats: set[str] = field(default_factory=set)
    sort_key: str | None = None
    publisher: str | None = None
    pubdate: str | None = None
    timestamp: str | None = None
    rating: int | None = None
    languages: list[str] = field(default_factory=list)

    @property
    def author(self) -> str:
        """Joined author string for display."""
        return ", ".join(self.authors)

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match on the title or any author."""
        needle = term.lower()
        if needle in self.title.lower():
            return True
        return any(needle in name.lower() for name in self.authors)

    def has_any_format(self, formats: set[str]) -> bool:
        """Whether this book has at least one of the given uppercase formats."""
        return not self.formats.isdisjoint(formats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "authors": list(self.authors),
            "series": self.series,
            "series_index": self.series_index,
            "tags": sorted(self.tags),
            "comments": self.comments,
            "has_cover": self.has_cover,
            "formats": sorted(self.formats),
            "sort": self.sort_key,
            "publisher": self.publisher,
            "pubdate": self.pubdate,
            "timestamp": self.timestamp,
            "rating": self.rating,
            "languages": list(self.languages),
        }


@dataclass
class Author:
    id: int
    name: str
    sort_key: str | None
    book_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sort": self.sort_key,
            "book_count": self.book_count,
        }


@dataclass
class Tag:
    id: int
    name: str
    book_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "book_count": self.book_count}


@dataclass
class Series:
    id: int
    name: str
    sort_key: str | None
    book_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sort": self.sort_key,
            "book_count": self.book_count,
        }


def row_to_author(row: Any) -> Author:
    return Author(
        id=row["id"],
        name=row["name"],
        sort_key=row["sort"],
        book_count=row["book_count"],
    )


def row_to_tag(row: Any) -> Tag:
    return Tag(id=row["id"], name=row["name"], book_count=row["book_count"])


def row_to_series(row: Any) -> Series:
    return Series(
        id=row["id"],
        name=row["name"],
        sort_key=row["sort"],
        book_count=row["book_count"],
    )


def normalize_format(fmt: str) -> str:
    """Normalize a format name or extension to the catalog's uppercase form.

    Accepts "epub", ".epub", or "EPUB" and returns "EPUB".
    """
    return fmt.strip().lstrip(".").upper()
