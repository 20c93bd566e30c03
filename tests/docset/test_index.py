"""Tests for the search index."""

from __future__ import annotations

import itertools
import sqlite3
from pathlib import Path

from godocset.crawler.extractor import SymbolEntry, SymbolKind
from godocset.docset import SearchIndex


ENTRIES = [
    SymbolEntry("foo", SymbolKind.PACKAGE, "pkg/foo/index.html"),
    SymbolEntry("Open", SymbolKind.FUNCTION, "pkg/foo/index.html#Open"),
    SymbolEntry("Open", SymbolKind.METHOD, "pkg/foo/index.html#Open"),
]


def _rows(path: Path):
    connection = sqlite3.connect(str(path))
    try:
        return connection.execute("SELECT name, type, path FROM searchIndex ORDER BY id").fetchall()
    finally:
        connection.close()


def test_schema_matches_dash_layout(tmp_path: Path) -> None:
    path = tmp_path / "docSet.dsidx"
    SearchIndex.create(str(path)).close()

    connection = sqlite3.connect(str(path))
    columns = [row[1] for row in connection.execute("PRAGMA table_info(searchIndex)")]
    indexes = connection.execute("PRAGMA index_list(searchIndex)").fetchall()
    connection.close()

    assert columns == ["id", "name", "type", "path"]
    assert any(row[1] == "anchor" and row[2] == 1 for row in indexes)


def test_duplicates_are_ignored_in_any_order(tmp_path: Path) -> None:
    for number, order in enumerate(itertools.permutations(ENTRIES)):
        with SearchIndex.create(str(tmp_path / f"{number}.dsidx")) as index:
            for entry in order + order:
                index.add(entry)
            index.commit()

            assert index.count() == 3
            assert index.entries() == sorted(entry.as_row() for entry in ENTRIES)


def test_create_discards_existing_index(tmp_path: Path) -> None:
    path = tmp_path / "docSet.dsidx"
    with SearchIndex.create(str(path)) as index:
        index.add_all(ENTRIES)
        index.commit()

    with SearchIndex.create(str(path)) as index:
        assert index.count() == 0


def test_nothing_is_visible_before_commit(tmp_path: Path) -> None:
    path = tmp_path / "docSet.dsidx"
    index = SearchIndex.create(str(path))
    index.add_all(ENTRIES)

    assert _rows(path) == []

    index.commit()
    index.close()

    assert _rows(path) == [entry.as_row() for entry in ENTRIES]


def test_close_without_commit_loses_rows(tmp_path: Path) -> None:
    path = tmp_path / "docSet.dsidx"
    index = SearchIndex.create(str(path))
    index.add_all(ENTRIES)
    index.close()

    assert _rows(path) == []


def test_rollback_discards_pending_rows(tmp_path: Path) -> None:
    path = tmp_path / "docSet.dsidx"
    with SearchIndex.create(str(path)) as index:
        index.add_all(ENTRIES)
        index.rollback()

        assert index.count() == 0

        index.add(ENTRIES[0])
        index.commit()

    assert _rows(path) == [ENTRIES[0].as_row()]
