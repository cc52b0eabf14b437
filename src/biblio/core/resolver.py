# ABOUTME: Locates book covers and format files inside a Calibre library tree.
# ABOUTME: Matches book directories by the trailing "(<book id>)" naming convention.

from dataclasses import dataclass
from pathlib import Path

from biblio.db.mapping import normalize_format

COVER_FILENAME = "cover.jpg"
COVER_CONTENT_TYPE = "image/jpeg"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    "EPUB": "application/epub+zip",
    "PDF": "application/pdf",
    "MOBI": "application/x-mobipocket-ebook",
    "AZW": "application/vnd.amazon.ebook",
    "AZW3": "application/vnd.amazon.ebook",
    "HTML": "text/html",
    "TXT": "text/plain; charset=utf-8",
    "CBZ": "application/vnd.comicbook+zip",
    "CBR": "application/vnd.comicbook-rar",
    "FB2": "application/x-fictionbook+xml",
    "RTF": "application/rtf",
}


def content_type_for(fmt: str) -> str:
    """MIME type for a format name or extension, octet-stream if unknown."""
    return MIME_TYPES.get(normalize_format(fmt), DEFAULT_CONTENT_TYPE)


@dataclass
class Artifact:
    """A file served for a book: its bytes, MIME type, and original file name."""

    data: bytes
    content_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        return f'inline; filename="{self.filename}"'


def _subdirs(directory: Path) -> list[Path]:
    """Immediate subdirectories in name order. Missing directories have none."""
    try:
        return sorted(child for child in directory.iterdir() if child.is_dir())
    except (FileNotFoundError, NotADirectoryError):
        return []


class ContentResolver:
    """Resolves (library root, book id) pairs to files on disk.

    Calibre stores each book as <root>/<author>/<title> (<id>)/. Nothing is
    cached; every call reflects the filesystem as it is now. Missing
    directories and files resolve to None, while permission and other I/O
    errors propagate.
    """

    def find_book_dir(self, root: Path, book_id: int) -> Path | None:
        """Find the directory of a book, or None if no directory carries its id.

        Author and book directories are visited in sorted order, so when two
        siblings share the same suffix the first by name wins.
        """
        suffix = f"({book_id})"
        for author_dir in _subdirs(root):
            for book_dir in _subdirs(author_dir):
                if book_dir.name.endswith(suffix):
                    return book_dir
        return None

    def get_cover(self, root: Path, book_id: int) -> Artifact | None:
        """Read cover.jpg for a book."""
        book_dir = self.find_book_dir(root, book_id)
        if book_dir is None:
            return None
        cover = book_dir / COVER_FILENAME
        if not cover.is_file():
            return None
        return Artifact(data=cover.read_bytes(), content_type=COVER_CONTENT_TYPE, filename=cover.name)

    def get_format(self, root: Path, book_id: int, fmt: str) -> Artifact | None:
        """Read the file of a book whose extension matches fmt, ignoring case."""
        book_dir = self.find_book_dir(root, book_id)
        if book_dir is None:
            return None
        wanted = normalize_format(fmt)
        try:
            entries = sorted(book_dir.iterdir())
        except FileNotFoundError:
            return None
        for path in entries:
            if path.is_file() and path.suffix and normalize_format(path.suffix) == wanted:
                return Artifact(
                    data=path.read_bytes(),
                    content_type=content_type_for(wanted),
                    filename=path.name,
                )
        return None
