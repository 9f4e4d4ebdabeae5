"""SQLite connection adapter for the series store.

Satisfies :class:`~tsengine.core.protocols.Connection` over one
:class:`sqlite3.Connection`. Rows come back as :class:`sqlite3.Row` so the
store reads columns by name (``row["ts_date"]``).
"""

from __future__ import annotations

import sqlite3
import threading
from typing import Any


class SqliteConnection:
    """One sqlite3 connection and cursor shared by the store's queries.

    Collaborator calls run on ``run_with_timeout`` worker threads, so the
    connection is opened with ``check_same_thread=False``. ``lock`` is held by
    :class:`~tsengine.stores.sqlite.SqliteSeriesStore` across each
    execute/fetch pair so two queries never interleave on the cursor.
    """

    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._cursor = self._conn.cursor()
        self.lock = threading.RLock()

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        return self._cursor.execute(sql, params)

    def executemany(self, sql: str, params: list[tuple]) -> sqlite3.Cursor:
        return self._cursor.executemany(sql, params)

    def fetchone(self) -> sqlite3.Row | None:
        return self._cursor.fetchone()

    def fetchall(self) -> list[sqlite3.Row]:
        return self._cursor.fetchall()

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        """Discard uncommitted writes, e.g. a half-applied schema."""
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()

    def __repr__(self) -> str:
        return f"SqliteConnection({self._conn!r})"
