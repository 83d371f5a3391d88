"""Store lifecycle: open/reconcile/close of the database file, plus the CRUD handle.

``StoreHelper`` owns one database file described by a ``StoreContract``. The
first open creates the tables; any later open that finds a different persisted
version (``PRAGMA user_version``) drops and recreates them. The store is a
disposable cache, so no data is carried across versions.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from enum import Enum
from typing import Any, Mapping, Sequence

from .contract import FEED_READER, StoreContract, TableContract
from .db import connect, get_db_path
from .errors import InsertFailed, ResourceMisuse, StorageUnavailable, StoreError, WriteFailed
from .predicate import Predicate, order_clause, require_column, where_clause

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    READ = "read"
    WRITE = "write"


class Cursor:
    """Forward-only query result. Only iterable inside its ``with`` block."""

    def __init__(self, handle: "StoreHandle", sql: str, params: list[Any]):
        self._handle = handle
        self._sql = sql
        self._params = params
        self._cur: sqlite3.Cursor | None = None
        self._released = False

    @property
    def is_open(self) -> bool:
        return self._cur is not None

    def __enter__(self) -> "Cursor":
        if self._released or self._cur is not None:
            raise ResourceMisuse("cursor already used")
        conn = self._handle._require_open()
        try:
            self._cur = conn.execute(self._sql, self._params)
        except sqlite3.Error as e:
            logger.error(f"query failed: {e}")
            raise StoreError(f"query failed: {e}") from e
        self._handle._cursors.add(self)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._release()

    def __iter__(self) -> "Cursor":
        return self

    def __next__(self) -> sqlite3.Row:
        if self._cur is None:
            raise ResourceMisuse("cursor must be used inside a 'with' block")
        row = self._cur.fetchone()
        if row is None:
            raise StopIteration
        return row

    def _release(self) -> None:
        if self._cur is not None:
            self._cur.close()
            self._cur = None
            self._handle._cursors.discard(self)
        self._released = True


class StoreHandle:
    """A read or write connection to the store.

    Open -> Closed; a closed handle stays closed, ask the helper for a new one.
    """

    def __init__(self, helper: "StoreHelper", conn: sqlite3.Connection, mode: Mode):
        self._helper = helper
        self._conn: sqlite3.Connection | None = conn
        self.mode = mode
        self._cursors: set[Cursor] = set()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> "StoreHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_open(self) -> sqlite3.Connection:
        if self._conn is None:
            raise ResourceMisuse(f"{self.mode.value} handle is closed")
        return self._conn

    def _table(self, table: str | None) -> TableContract:
        if table is None:
            return self._helper.contract.tables[0]
        try:
            return self._helper.contract.table(table)
        except KeyError:
            raise StoreError(f"no such table: {table!r}") from None

    def _assignable(self, t: TableContract, values: Mapping[str, Any]) -> list[str]:
        cols = [require_column(t, c) for c in values]
        if t.id_column in cols:
            raise ValueError(f"{t.id_column} is assigned by the store and cannot be written")
        return cols

    def insert(self, values: Mapping[str, Any], table: str | None = None) -> int:
        """Insert one row; columns not in ``values`` stay NULL. Returns the new row id."""
        conn = self._require_open()
        t = self._table(table)
        cols = self._assignable(t, values)
        if cols:
            sql = (
                f"INSERT INTO {t.table_name}({', '.join(cols)}) "
                f"VALUES({', '.join('?' for _ in cols)})"
            )
        else:
            sql = f"INSERT INTO {t.table_name} DEFAULT VALUES"
        try:
            cur = conn.execute(sql, [values[c] for c in cols])
        except sqlite3.Error as e:
            logger.error(f"insert into {t.table_name} failed: {e}")
            raise InsertFailed(f"insert into {t.table_name} failed: {e}") from e
        row_id = int(cur.lastrowid)
        logger.debug(f"inserted {t.table_name} row {row_id}")
        return row_id

    def query(
        self,
        columns: Sequence[str] | None = None,
        predicate: Predicate | None = None,
        order_by: str | Sequence[str] | None = None,
        table: str | None = None,
    ) -> Cursor:
        """
        Build a cursor over matching rows projected to ``columns`` (all when None).
        Column names are validated here; rows are only read inside ``with``.
        """
        self._require_open()
        t = self._table(table)
        if columns is None:
            proj = list(t.all_columns)
        elif not columns:
            raise ValueError("empty projection")
        else:
            proj = [require_column(t, c) for c in columns]
        where, params = where_clause(t, predicate)
        sql = f"SELECT {', '.join(proj)} FROM {t.table_name}{where}{order_clause(t, order_by)}"
        return Cursor(self, sql, params)

    def update(self, values: Mapping[str, Any], predicate: Predicate | None = None, table: str | None = None) -> int:
        conn = self._require_open()
        t = self._table(table)
        cols = self._assignable(t, values)
        if not cols:
            raise ValueError("update needs at least one column")
        where, params = where_clause(t, predicate)
        sql = f"UPDATE {t.table_name} SET {', '.join(f'{c}=?' for c in cols)}{where}"
        try:
            cur = conn.execute(sql, [values[c] for c in cols] + params)
        except sqlite3.Error as e:
            logger.error(f"update of {t.table_name} failed: {e}")
            raise WriteFailed(f"update of {t.table_name} failed: {e}") from e
        logger.debug(f"updated {cur.rowcount} {t.table_name} row(s)")
        return cur.rowcount

    def delete(self, predicate: Predicate | None = None, table: str | None = None) -> int:
        conn = self._require_open()
        t = self._table(table)
        where, params = where_clause(t, predicate)
        try:
            cur = conn.execute(f"DELETE FROM {t.table_name}{where}", params)
        except sqlite3.Error as e:
            logger.error(f"delete from {t.table_name} failed: {e}")
            raise WriteFailed(f"delete from {t.table_name} failed: {e}") from e
        logger.debug(f"deleted {cur.rowcount} {t.table_name} row(s)")
        return cur.rowcount

    def count(self, predicate: Predicate | None = None, table: str | None = None) -> int:
        conn = self._require_open()
        t = self._table(table)
        where, params = where_clause(t, predicate)
        try:
            row = conn.execute(f"SELECT COUNT(1) AS c FROM {t.table_name}{where}", params).fetchone()
        except sqlite3.Error as e:
            logger.error(f"count on {t.table_name} failed: {e}")
            raise StoreError(f"count on {t.table_name} failed: {e}") from e
        return int(row["c"])

    def close(self) -> None:
        """Release the connection. Idempotent; refuses while cursors are open."""
        if self._conn is None:
            return
        if self._cursors:
            raise ResourceMisuse(f"{len(self._cursors)} cursor(s) still open on {self.mode.value} handle")
        self._conn.close()
        self._conn = None
        self._helper._forget(self)


class StoreHelper:
    """Owns the database file of one ``StoreContract``."""

    def __init__(self, contract: StoreContract = FEED_READER, db_path: str | None = None):
        if contract.version < 1:
            raise ValueError(f"version must be >= 1, was {contract.version}")
        if not contract.tables:
            raise ValueError("contract has no tables")
        self.contract = contract
        self.db_path = get_db_path(db_path, contract.file_name)
        self._handles: dict[Mode, StoreHandle] = {}
        self._lock = threading.RLock()

    def __enter__(self) -> "StoreHelper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def writable_database(self) -> StoreHandle:
        return self.open(Mode.WRITE)

    @property
    def readable_database(self) -> StoreHandle:
        return self.open(Mode.READ)

    def open(self, mode: Mode | str = Mode.WRITE) -> StoreHandle:
        """Return the open handle for ``mode``, opening (and reconciling) if needed."""
        mode = Mode(mode)
        with self._lock:
            handle = self._handles.get(mode)
            if handle is not None and handle.is_open:
                return handle
            conn = self._open_connection(mode)
            handle = StoreHandle(self, conn, mode)
            self._handles[mode] = handle
            logger.info(f"opened {self.contract.name} ({mode.value}) at {self.db_path}")
            return handle

    def _open_connection(self, mode: Mode) -> sqlite3.Connection:
        try:
            if mode is Mode.READ:
                if Mode.WRITE not in self._handles:
                    prep = connect(self.db_path)
                    try:
                        self._prepare(prep)
                    finally:
                        prep.close()
                return connect(self.db_path, read_only=True)
            conn = connect(self.db_path)
            try:
                self._prepare(conn)
            except BaseException:
                conn.close()
                raise
            return conn
        except sqlite3.Error as e:
            logger.error(f"cannot open {self.db_path}: {e}")
            raise StorageUnavailable(f"cannot open {self.db_path}: {e}") from e

    def persisted_version(self, conn: sqlite3.Connection) -> int:
        return int(conn.execute("PRAGMA user_version").fetchone()[0])

    def _prepare(self, conn: sqlite3.Connection) -> None:
        expected = self.contract.version
        if self.persisted_version(conn) == expected:
            return
        conn.execute("BEGIN IMMEDIATE")
        try:
            # re-read under the write lock
            persisted = self.persisted_version(conn)
            if persisted == 0:
                self.on_create(conn)
            elif persisted != expected:
                self.reconcile(conn, persisted, expected)
            conn.execute(f"PRAGMA user_version = {int(expected)}")
            conn.execute("COMMIT")
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise

    def on_create(self, conn: sqlite3.Connection) -> None:
        logger.info(f"creating {self.contract.name} schema")
        for t in self.contract.tables:
            conn.execute(t.create_sql)

    def reconcile(self, conn: sqlite3.Connection, persisted: int, expected: int) -> None:
        if persisted < expected:
            self.on_upgrade(conn, persisted, expected)
        else:
            self.on_downgrade(conn, persisted, expected)

    def on_upgrade(self, conn: sqlite3.Connection, old_version: int, new_version: int) -> None:
        logger.info(f"upgrading {self.contract.name} {old_version} -> {new_version}, discarding data")
        self._recreate(conn)

    def on_downgrade(self, conn: sqlite3.Connection, old_version: int, new_version: int) -> None:
        logger.info(f"downgrading {self.contract.name} {old_version} -> {new_version}, discarding data")
        self._recreate(conn)

    def _recreate(self, conn: sqlite3.Connection) -> None:
        for t in self.contract.tables:
            conn.execute(t.drop_sql)
        self.on_create(conn)

    def _forget(self, handle: StoreHandle) -> None:
        with self._lock:
            if self._handles.get(handle.mode) is handle:
                del self._handles[handle.mode]

    def close(self) -> None:
        """Close every handle this helper opened. Safe to call repeatedly."""
        with self._lock:
            for handle in list(self._handles.values()):
                handle.close()
        logger.info(f"closed {self.contract.name}")
