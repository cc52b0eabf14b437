# ABOUTME: Shared pytest fixtures for Biblio tests.
# ABOUTME: Builds Calibre-style library trees with real SQLite catalogs.

from collections.abc import Iterator
from pathlib import Path

import pytest

from biblio.config import BiblioConfig
from biblio.core.index import LibraryIndex
from biblio.db.catalog import CatalogReader
from tests.fixtures.calibre_schema import add_author, add_book, add_series, add_tag, create_catalog


def build_fiction_library(root: Path) -> Path:
    """Create a populated Calibre library at root.

    Layout:
        Fiction/
            metadata.db
            Umberto Eco/
                The Name of the Rose (1)/
                    The Name of the Rose - Umberto Eco.epub
                    The Name of the Rose - Umberto Eco.mobi
                    cover.jpg
            Frank Herbert/
                Dune (2)/
                    Dune - Frank Herbert.EPUB
            Terry Pratchett/
                Good Omens (3)/
                    Good Omens - Terry Pratchett.pdf
    """
    conn = create_catalog(root / "metadata.db")
    add_book(
        conn,
        "The Name of the Rose",
        authors=["Umberto Eco"],
        tags=["classic", "mystery"],
        series="Adso of Melk",
        series_index=1.0,
        formats=["EPUB", "mobi"],
        comments="A mystery in a medieval monastery.",
        has_cover=True,
        timestamp="2020-01-01 00:00:00+00:00",
        pubdate="1980-01-01 00:00:00+00:00",
        sort="Name of the Rose, The",
        publisher="Harcourt",
        rating=8,
        languages=["eng", "ita"],
    )
    add_book(
        conn,
        "Dune",
        authors=["Frank Herbert"],
        tags=["scifi"],
        series="Dune",
        series_index=1.0,
        formats=["EPUB"],
        timestamp="2021-05-01 00:00:00+00:00",
    )
    add_book(
        conn,
        "Good Omens",
        authors=["Terry Pratchett", "Neil Gaiman"],
        tags=["fantasy", "comedy"],
        formats=["PDF"],
        timestamp="2019-03-15 00:00:00+00:00",
    )
    # Entries without any books still show up in aggregate listings.
    add_author(conn, "Ursula K. Le Guin", sort="Le Guin, Ursula K.")
    add_tag(conn, "unread")
    add_series(conn, "Discworld")
    conn.commit()
    conn.close()

    rose = root / "Umberto Eco" / "The Name of the Rose (1)"
    rose.mkdir(parents=True)
    (rose / "The Name of the Rose - Umberto Eco.epub").write_bytes(b"rose epub")
    (rose / "The Name of the Rose - Umberto Eco.mobi").write_bytes(b"rose mobi")
    (rose / "cover.jpg").write_bytes(b"rose cover")

    dune = root / "Frank Herbert" / "Dune (2)"
    dune.mkdir(parents=True)
    (dune / "Dune - Frank Herbert.EPUB").write_bytes(b"dune epub")

    omens = root / "Terry Pratchett" / "Good Omens (3)"
    omens.mkdir(parents=True)
    (omens / "Good Omens - Terry Pratchett.pdf").write_bytes(b"omens pdf")

    return root


@pytest.fixture
def fiction_library(tmp_path: Path) -> Path:
    """A single populated library root."""
    return build_fiction_library(tmp_path / "Fiction")


@pytest.fixture
def fiction_catalog(fiction_library: Path) -> Iterator[CatalogReader]:
    """An open reader over the fiction library's catalog."""
    reader = CatalogReader.open(fiction_library / "metadata.db")
    yield reader
    reader.close()


@pytest.fixture
def libraries_root(tmp_path: Path) -> Path:
    """A base directory holding several libraries at different depths.

    Layout:
        libraries/
            Fiction/metadata.db          (3 books, depth 1)
            collections/Archive/metadata.db  (0 books, depth 2)
            too/deep/Hidden/metadata.db  (depth 3, beyond the scan)
            Broken/metadata.db           (not a database)
            notes/                       (no catalog)
    """
    base = tmp_path / "libraries"
    build_fiction_library(base / "Fiction")

    create_catalog(base / "collections" / "Archive" / "metadata.db").close()

    hidden = create_catalog(base / "too" / "deep" / "Hidden" / "metadata.db")
    add_book(hidden, "Never Found", authors=["Nobody"])
    hidden.close()

    broken = base / "Broken"
    broken.mkdir()
    (broken / "metadata.db").write_bytes(b"this is not a sqlite database " * 64)

    (base / "notes").mkdir()
    (base / "notes" / "readme.txt").write_text("not a library")

    return base


@pytest.fixture
def config(libraries_root: Path) -> BiblioConfig:
    return BiblioConfig(library_path=libraries_root)


@pytest.fixture
def index(config: BiblioConfig) -> Iterator[LibraryIndex]:
    """An index already rebuilt over libraries_root."""
    library_index = LibraryIndex(config)
    library_index.rebuild()
    yield library_index
    library_index.clear()
