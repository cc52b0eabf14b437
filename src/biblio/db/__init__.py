# ABOUTME: Public API for the Biblio catalog layer.
# ABOUTME: Exports the read-only catalog reader, its error type, and entity types.

from biblio.db.catalog import MAX_BOOKS, CatalogError, CatalogReader
from biblio.db.connection import open_catalog
from biblio.db.mapping import Author, Book, Series, Tag, normalize_format

__all__ = [
    "MAX_BOOKS",
    "Author",
    "Book",
    "CatalogError",
    "CatalogReader",
    "Series",
    "Tag",
    "normalize_format",
    "open_catalog",
]
