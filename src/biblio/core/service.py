# ABOUTME: Request/response operations over the library index for an outer routing layer.
# ABOUTME: Applies search and format filters and maps errors to uniform responses.

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from biblio.config import BiblioConfig
from biblio.core.index import LibraryIndex
from biblio.core.resolver import Artifact, ContentResolver
from biblio.core.scanner import ScanIoError
from biblio.db.catalog import CatalogError, CatalogReader
from biblio.db.mapping import normalize_format

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotFoundError(Exception):
    """Raised when a library, book, or file does not exist."""

    def __init__(self, what: str) -> None:
        super().__init__(f"{what} not found")
        self.what = what


@dataclass
class ApiResponse:
    """Uniform result envelope: data on success, a short message on failure."""

    success: bool
    data: Any = None
    error: str | None = None
    status: int = 200

    @classmethod
    def ok(cls, data: Any) -> "ApiResponse":
        return cls(success=True, data=data)

    @classmethod
    def not_found(cls, what: str) -> "ApiResponse":
        return cls(success=False, error=f"{what} not found", status=404)

    @classmethod
    def failure(cls, message: str) -> "ApiResponse":
        return cls(success=False, error=message, status=500)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form. Entities are converted via their to_dict()."""
        return {"success": self.success, "data": _plain(self.data), "error": self.error}


def _plain(value: Any) -> Any:
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def _normalize_formats(formats: Iterable[str] | None) -> set[str]:
    return {normalize_format(fmt) for fmt in formats or () if fmt.strip()}


class LibraryService:
    """Library, book, and file lookups returning ApiResponse values.

    Catalog queries run while holding the index lock. File reads only hold it
    long enough to look up the library's root path.
    """

    def __init__(
        self,
        index: LibraryIndex,
        resolver: ContentResolver | None = None,
        config: BiblioConfig | None = None,
    ) -> None:
        self._index = index
        self._resolver = resolver or ContentResolver()
        self._config = config or BiblioConfig()

    # --- Libraries ---

    def list_libraries(self) -> ApiResponse:
        return ApiResponse.ok(self._index.list_libraries())

    def get_library(self, library_id: str) -> ApiResponse:
        library = self._index.lookup_library(library_id)
        if library is None:
            return ApiResponse.not_found("Library")
        return ApiResponse.ok(library)

    def refresh(self) -> ApiResponse:
        """Rebuild the index from the configured library path."""
        base = self._config.library_path
        if not base.exists():
            self._index.clear()
            return ApiResponse.failure("Libraries path not found")
        try:
            return ApiResponse.ok(self._index.rebuild(base))
        except ScanIoError as exc:
            logger.error("Library refresh failed: %s", exc)
            return ApiResponse.failure(f"Failed to refresh libraries: {exc}")

    # --- Catalog queries ---

    def list_books(
        self,
        library_id: str,
        search: str | None = None,
        formats: Iterable[str] | None = None,
    ) -> ApiResponse:
        """Books in a library, optionally filtered.

        Args:
            library_id: The library to query.
            search: Case-insensitive substring matched against title and authors.
            formats: Keep only books having at least one of these formats.
        """
        wanted = _normalize_formats(formats)

        def query(reader: CatalogReader) -> list:
            books = reader.list_books()
            if search:
                books = [book for book in books if book.matches_search(search)]
            if wanted:
                books = [book for book in books if book.has_any_format(wanted)]
            return books

        return self._with_catalog(library_id, query)

    def get_book(self, library_id: str, book_id: int) -> ApiResponse:
        def query(reader: CatalogReader) -> Any:
            book = reader.get_book(book_id)
            if book is None:
                raise NotFoundError("Book")
            return book

        return self._with_catalog(library_id, query)

    def list_authors(self, library_id: str) -> ApiResponse:
        return self._with_catalog(library_id, lambda reader: reader.list_authors())

    def list_tags(self, library_id: str) -> ApiResponse:
        return self._with_catalog(library_id, lambda reader: reader.list_tags())

    def list_series(self, library_id: str) -> ApiResponse:
        return self._with_catalog(library_id, lambda reader: reader.list_series())

    def list_book_formats(self, library_id: str, book_id: int) -> ApiResponse:
        return self._with_catalog(library_id, lambda reader: reader.list_book_formats(book_id))

    # --- Files ---

    def get_cover(self, library_id: str, book_id: int) -> ApiResponse:
        return self._with_root(library_id, lambda root: self._resolver.get_cover(root, book_id))

    def get_book_file(self, library_id: str, book_id: int, fmt: str) -> ApiResponse:
        return self._with_root(
            library_id, lambda root: self._resolver.get_format(root, book_id, fmt)
        )

    # --- Internals ---

    def _with_catalog(self, library_id: str, query: Callable[[CatalogReader], T]) -> ApiResponse:
        with self._index.lock:
            reader = self._index.lookup_catalog(library_id)
            if reader is None:
                return ApiResponse.not_found("Library")
            try:
                return ApiResponse.ok(query(reader))
            except NotFoundError as exc:
                return ApiResponse.not_found(exc.what)
            except CatalogError as exc:
                logger.error("Catalog query failed for library %s: %s", library_id, exc)
                return ApiResponse.failure(str(exc))

    def _with_root(self, library_id: str, resolve: Callable[..., Artifact | None]) -> ApiResponse:
        library = self._index.lookup_library(library_id)
        if library is None:
            return ApiResponse.not_found("Library")
        try:
            artifact = resolve(library.root_path)
        except FileNotFoundError:
            # Removed between lookup and read.
            return ApiResponse.not_found("File")
        except OSError as exc:
            logger.error("Reading files for library %s failed: %s", library_id, exc)
            return ApiResponse.failure(f"Failed to read file: {exc}")
        if artifact is None:
            return ApiResponse.not_found("File")
        return ApiResponse.ok(artifact)
