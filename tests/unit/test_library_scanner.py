# ABOUTME: Unit tests for the library scanner.
# ABOUTME: Tests library root detection, depth bounds, stable ids, and skip-on-error behavior.

import logging
import os
import uuid
from pathlib import Path
from typing import Any

import pytest

from biblio.config import BiblioConfig
from biblio.core.scanner import Library, LibraryScanner, ScanIoError, library_id
from tests.fixtures.calibre_schema import add_book, create_catalog


def _scan(base: Path, **overrides: Any) -> list[Library]:
    return LibraryScanner(BiblioConfig(library_path=base, **overrides)).scan()


class TestLibraryId:
    """library_id should be a deterministic name-based UUID of the path."""

    def test_is_uuid5_of_absolute_path(self, tmp_path: Path) -> None:
        expected = str(uuid.uuid5(uuid.NAMESPACE_DNS, str(tmp_path.absolute())))
        assert library_id(tmp_path) == expected

    def test_same_path_same_id(self, tmp_path: Path) -> None:
        assert library_id(tmp_path / "A") == library_id(tmp_path / "A")

    def test_different_paths_differ(self, tmp_path: Path) -> None:
        assert library_id(tmp_path / "A") != library_id(tmp_path / "B")


class TestScan:
    """LibraryScanner.scan should find library roots within the depth bound."""

    def test_finds_libraries_within_depth(self, libraries_root: Path) -> None:
        names = [lib.name for lib in _scan(libraries_root)]
        assert names == ["Archive", "Fiction"]

    def test_skips_unreadable_catalog_with_warning(self, libraries_root: Path, caplog: Any) -> None:
        with caplog.at_level(logging.WARNING):
            libraries = _scan(libraries_root)

        assert "Broken" not in [lib.name for lib in libraries]
        assert any("Broken" in r.message for r in caplog.records)

    def test_ignores_libraries_beyond_depth(self, libraries_root: Path) -> None:
        assert "Hidden" not in [lib.name for lib in _scan(libraries_root)]

    def test_deeper_scan_finds_more(self, libraries_root: Path) -> None:
        names = [lib.name for lib in _scan(libraries_root, max_scan_depth=3)]
        assert "Hidden" in names

    def test_library_fields(self, libraries_root: Path) -> None:
        fiction = next(lib for lib in _scan(libraries_root) if lib.name == "Fiction")
        root = (libraries_root / "Fiction").absolute()

        assert fiction.id == library_id(root)
        assert fiction.root_path == root
        assert fiction.catalog_path == root / "metadata.db"
        assert fiction.book_count == 3

    def test_empty_catalog_counts_zero(self, libraries_root: Path) -> None:
        archive = next(lib for lib in _scan(libraries_root) if lib.name == "Archive")
        assert archive.book_count == 0

    def test_ids_stable_across_scans(self, libraries_root: Path) -> None:
        first = [lib.id for lib in _scan(libraries_root)]
        second = [lib.id for lib in _scan(libraries_root)]
        assert first == second
        assert all(first)

    def test_base_itself_can_be_a_library(self, tmp_path: Path) -> None:
        conn = create_catalog(tmp_path / "Solo" / "metadata.db")
        add_book(conn, "Only Book")
        conn.close()

        libraries = _scan(tmp_path / "Solo")
        assert [(lib.name, lib.book_count) for lib in libraries] == [("Solo", 1)]

    def test_sorted_by_name(self, tmp_path: Path) -> None:
        for name in ("Zeta", "Alpha", "Mid"):
            create_catalog(tmp_path / name / "metadata.db").close()
        assert [lib.name for lib in _scan(tmp_path)] == ["Alpha", "Mid", "Zeta"]

    def test_catalog_directory_is_not_a_library(self, tmp_path: Path) -> None:
        """A directory named metadata.db does not mark a library root."""
        (tmp_path / "Odd" / "metadata.db").mkdir(parents=True)
        assert _scan(tmp_path) == []

    def test_custom_catalog_filename(self, tmp_path: Path) -> None:
        create_catalog(tmp_path / "Lib" / "catalog.sqlite").close()
        libraries = _scan(tmp_path, catalog_filename="catalog.sqlite")
        assert [lib.name for lib in libraries] == ["Lib"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinked_library_root_is_found_once(self, tmp_path: Path) -> None:
        create_catalog(tmp_path / "nas" / "Books" / "metadata.db").close()
        base = tmp_path / "base"
        base.mkdir()
        (base / "Books").symlink_to(tmp_path / "nas" / "Books", target_is_directory=True)

        libraries = _scan(base)

        assert [lib.name for lib in libraries] == ["Books"]
        assert libraries[0].root_path == base / "Books"

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_does_not_descend_into_symlinked_directories(self, tmp_path: Path) -> None:
        base = tmp_path / "base"
        create_catalog(base / "Real" / "metadata.db").close()
        create_catalog(tmp_path / "elsewhere" / "Nested" / "metadata.db").close()
        (base / "Link").symlink_to(base / "Real", target_is_directory=True)
        (base / "Shelf").symlink_to(tmp_path / "elsewhere", target_is_directory=True)
        (base / "Real" / "Loop").symlink_to(base, target_is_directory=True)

        assert [lib.name for lib in _scan(base)] == ["Link", "Real"]


class TestScanErrors:
    """Base directory failures raise ScanIoError."""

    def test_missing_base_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ScanIoError):
            _scan(tmp_path / "does-not-exist")

    def test_file_as_base_raises(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("not a directory")
        with pytest.raises(ScanIoError):
            _scan(target)

    def test_empty_base_finds_nothing(self, tmp_path: Path) -> None:
        assert _scan(tmp_path) == []


class TestLibrary:
    def test_to_dict(self, tmp_path: Path) -> None:
        library = Library(
            id="abc",
            name="Fiction",
            root_path=tmp_path,
            catalog_path=tmp_path / "metadata.db",
            book_count=2,
        )
        assert library.to_dict() == {
            "id": "abc",
            "name": "Fiction",
            "path": str(tmp_path),
            "metadata_db_path": str(tmp_path / "metadata.db"),
            "book_count": 2,
        }
