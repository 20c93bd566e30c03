"""
Search index of a docset.

A SQLite database with the ``searchIndex`` table Dash reads. All inserts of
a run share one transaction that is committed once at the end.
"""

import os
import sqlite3
from typing import TYPE_CHECKING, Iterable, List, Tuple

from ..utils.log import get_logger
from ..utils.paths import ensure_parent_dir

if TYPE_CHECKING:
    from ..crawler.extractor import SymbolEntry


CREATE_TABLE_SQL = (
    "CREATE TABLE searchIndex(id INTEGER PRIMARY KEY, name TEXT, type TEXT, path TEXT)"
)
CREATE_INDEX_SQL = "CREATE UNIQUE INDEX anchor ON searchIndex (name, type, path)"
INSERT_SQL = "INSERT OR IGNORE INTO searchIndex(name, type, path) VALUES (?,?,?)"


class SearchIndex:
    """
    Deduplicating writer for the docset search index.

    The connection is only used from the event loop thread, so concurrent
    crawl tasks are serialized without extra locking. Duplicate
    (name, type, path) triples are ignored by the unique index.
    """

    def __init__(self, connection: sqlite3.Connection, path: str):
        """
        Wrap an open index connection. Use SearchIndex.create to build one.

        Args:
            connection: Open SQLite connection
            path: Database file path
        """
        self.path = path
        self.logger = get_logger("index")
        self._connection = connection

    @classmethod
    def create(cls, path: str) -> "SearchIndex":
        """
        Create an empty index, discarding any existing database at the path.

        Args:
            path: Database file path (``.../Contents/Resources/docSet.dsidx``)

        Returns:
            New index

        Raises:
            sqlite3.Error: If the schema cannot be created
            OSError: If the directory or old file cannot be handled
        """
        ensure_parent_dir(path)
        if os.path.exists(path):
            os.remove(path)

        connection = sqlite3.connect(path)
        try:
            connection.execute(CREATE_TABLE_SQL)
            connection.execute(CREATE_INDEX_SQL)
            connection.commit()
        except sqlite3.Error:
            connection.close()
            raise

        return cls(connection, path)

    def add(self, entry: "SymbolEntry") -> None:
        """
        Insert an entry inside the open transaction.

        Args:
            entry: Entry to insert; an identical entry is silently ignored
        """
        self._connection.execute(INSERT_SQL, entry.as_row())

    def add_all(self, entries: Iterable["SymbolEntry"]) -> None:
        """Insert several entries inside the open transaction."""
        self._connection.executemany(INSERT_SQL, [entry.as_row() for entry in entries])

    def commit(self) -> None:
        """Commit every insert of the run."""
        self._connection.commit()
        self.logger.debug(f"Committed search index {self.path}")

    def rollback(self) -> None:
        """Discard uncommitted inserts."""
        self._connection.rollback()

    def close(self) -> None:
        """Close the connection. Uncommitted inserts are lost."""
        self._connection.close()

    def count(self) -> int:
        """Get the number of rows visible to this connection."""
        return self._connection.execute("SELECT COUNT(*) FROM searchIndex").fetchone()[0]

    def entries(self) -> List[Tuple[str, str, str]]:
        """Get all (name, type, path) rows ordered for comparison."""
        rows = self._connection.execute(
            "SELECT name, type, path FROM searchIndex ORDER BY name, type, path"
        )
        return [tuple(row) for row in rows]

    def __enter__(self) -> "SearchIndex":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
