from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any, Iterable, Iterator


class Database:
    """Thread-safe SQLite connection shared by the GUI's worker threads."""

    def __init__(self, db_file: Path | str, timeout_seconds: int = 10) -> None:
        self.db_file = Path(db_file)
        self._lock = RLock()
        self._connection = sqlite3.connect(
            self.db_file,
            timeout=timeout_seconds,
            isolation_level=None,  # autocommit
            check_same_thread=False,
        )
        self._connection.row_factory = sqlite3.Row
        self._connection.execute("PRAGMA foreign_keys = ON;")
        self._connection.execute("PRAGMA journal_mode = WAL;")

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def close(self) -> None:
        with self._lock:
            self._connection.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block inside ``BEGIN IMMEDIATE``; rolls back on error."""
        with self._lock:
            self._connection.execute("BEGIN IMMEDIATE")
            try:
                yield self._connection
            except BaseException:
                self._connection.execute("ROLLBACK")
                raise
            else:
                self._connection.execute("COMMIT")

    def execute(self, sql: str, params: Iterable[Any] | dict[str, Any] | None = None) -> sqlite3.Cursor:
        with self._lock:
            cur = self._connection.cursor()
            cur.execute(sql, params if params is not None else [])
            return cur

    def query_all(self, sql: str, params: Iterable[Any] | dict[str, Any] | None = None) -> list[sqlite3.Row]:
        with self._lock:
            return list(self.execute(sql, params))

    def query_one(self, sql: str, params: Iterable[Any] | dict[str, Any] | None = None) -> sqlite3.Row | None:
        with self._lock:
            return self.execute(sql, params).fetchone()
