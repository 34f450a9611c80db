from __future__ import annotations

from contextlib import closing, contextmanager, suppress
from datetime import date, datetime
import logging
from pathlib import Path
import sqlite3
import threading
import time
from typing import Any, Iterable, Iterator

import pandas as pd

from task_tracker_app.config import AppConfig
from task_tracker_app.env import (
    TASKTRACKER_DB_POOL_ACQUIRE_TIMEOUT_SEC,
    TASKTRACKER_DB_POOL_MAX_SIZE,
    get_env_float,
    get_env_int,
)

LOGGER = logging.getLogger(__name__)

# sqlite3 reports a dead or unusable file through these messages; such a
# connection is dropped instead of going back to the pool.
_BROKEN_CONNECTION_MARKERS = (
    "unable to open",
    "disk i/o",
    "malformed",
    "not a database",
    "closed database",
)


class StoreError(RuntimeError):
    """Base class for any failure talking to the backing store."""


class DataConnectionError(StoreError):
    """No connection to the database file could be obtained."""


class DataQueryError(StoreError):
    """A read statement failed."""


class DataExecutionError(StoreError):
    """A write or DDL statement failed."""


class SQLiteClient:
    """Bounded pool of sqlite3 connections to the file named by ``AppConfig.db_path``.

    Connections are opened on demand, at most ``TASKTRACKER_DB_POOL_MAX_SIZE`` of
    them, and each is lent to one caller at a time. A caller that waits longer than
    ``TASKTRACKER_DB_POOL_ACQUIRE_TIMEOUT_SEC`` gets a ``DataConnectionError``.

    Every statement method returns a ``DataFrame`` with ``object`` columns so
    ``NULL`` stays ``None`` and integer ids stay ``int`` in JSON output.
    """

    def __init__(self, config: AppConfig) -> None:
        self.db_path = Path(config.db_path)
        self.max_connections = get_env_int(TASKTRACKER_DB_POOL_MAX_SIZE, default=8, min_value=1)
        self.acquire_timeout_sec = get_env_float(
            TASKTRACKER_DB_POOL_ACQUIRE_TIMEOUT_SEC,
            default=15.0,
            min_value=0.1,
        )
        self._available = threading.Condition()
        self._idle: list[sqlite3.Connection] = []
        self._opened = 0
        self._closed = False

    @property
    def open_connections(self) -> int:
        with self._available:
            return self._opened

    def _open(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path), timeout=30.0, check_same_thread=False)
        with suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _has_capacity(self) -> bool:
        return self._closed or bool(self._idle) or self._opened < self.max_connections

    def _checkout(self) -> sqlite3.Connection:
        with self._available:
            ready = self._available.wait_for(self._has_capacity, timeout=self.acquire_timeout_sec)
            if self._closed:
                raise DataConnectionError("SQLite client is closed.")
            if not ready:
                raise DataConnectionError(
                    f"Timed out waiting {self.acquire_timeout_sec:.1f}s for one of "
                    f"{self.max_connections} SQLite connections."
                )
            if self._idle:
                return self._idle.pop()
            self._opened += 1
        try:
            return self._open()
        except (sqlite3.Error, OSError) as exc:
            with self._available:
                self._opened -= 1
                self._available.notify()
            raise DataConnectionError(f"Failed to connect to SQLite database at {self.db_path}: {exc}") from exc

    def _checkin(self, conn: sqlite3.Connection, *, discard: bool) -> None:
        with self._available:
            keep = not (discard or self._closed)
            if keep:
                self._idle.append(conn)
            else:
                self._opened -= 1
            self._available.notify()
        if not keep:
            with suppress(sqlite3.Error):
                conn.close()

    def close(self) -> None:
        with self._available:
            self._closed = True
            idle, self._idle = self._idle, []
            self._opened -= len(idle)
            self._available.notify_all()
        for conn in idle:
            with suppress(sqlite3.Error):
                conn.close()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Borrow one pooled connection; it goes back to the pool whatever happens."""
        conn = self._checkout()
        discard = False
        try:
            yield conn
        except Exception as exc:
            discard = any(marker in str(exc).lower() for marker in _BROKEN_CONNECTION_MARKERS)
            if not discard:
                with suppress(sqlite3.Error):
                    conn.rollback()
            raise
        finally:
            self._checkin(conn, discard=discard)

    @staticmethod
    def _bind(params: Iterable[Any] | None) -> tuple[Any, ...]:
        # sqlite3's default date adapters are deprecated; store ISO text instead.
        return tuple(
            value.isoformat() if isinstance(value, (date, datetime)) else value
            for value in (params or ())
        )

    @staticmethod
    def _to_frame(cursor: sqlite3.Cursor) -> pd.DataFrame:
        columns = [column[0] for column in cursor.description or ()]
        return pd.DataFrame(cursor.fetchall(), columns=columns, dtype=object)

    def _run(
        self,
        statement: str,
        params: Iterable[Any] | None,
        *,
        commit: bool,
        error_type: type[StoreError],
    ) -> pd.DataFrame:
        sql = statement.strip()
        started = time.perf_counter()
        try:
            with self.connection() as conn:
                with closing(conn.execute(sql, self._bind(params))) as cursor:
                    frame = self._to_frame(cursor)
                if commit:
                    conn.commit()
        except sqlite3.Error as exc:
            raise error_type(f"{exc.__class__.__name__}: {exc}") from exc
        LOGGER.debug(
            "SQL done rows=%s ms=%.1f sql=%s",
            len(frame.index),
            (time.perf_counter() - started) * 1000.0,
            " ".join(sql.split()),
        )
        return frame

    def query(self, statement: str, params: Iterable[Any] | None = None) -> pd.DataFrame:
        return self._run(statement, params, commit=False, error_type=DataQueryError)

    def execute_returning(self, statement: str, params: Iterable[Any] | None = None) -> pd.DataFrame:
        """Run one ``INSERT``/``UPDATE ... RETURNING`` statement and commit it."""
        return self._run(statement, params, commit=True, error_type=DataExecutionError)

    def execute_batch(self, statements: Iterable[str]) -> None:
        """Run statements in order on a single connection and commit once."""
        try:
            with self.connection() as conn:
                for statement in statements:
                    conn.execute(statement.strip())
                conn.commit()
        except sqlite3.Error as exc:
            raise DataExecutionError(f"{exc.__class__.__name__}: {exc}") from exc
