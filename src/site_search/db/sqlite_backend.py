"""SQLite implementation of the Database protocol.

Thin wrapper around aiosqlite.Connection. The content schema and all
store queries are written in SQLite's dialect, so nothing is translated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import aiosqlite

    from site_search.db.backend import Cursor, Row

logger = logging.getLogger(__name__)


class SQLiteCursor:
    """Wraps aiosqlite.Cursor to satisfy the Cursor protocol."""

    def __init__(self, cursor: aiosqlite.Cursor) -> None:
        """Initialize with an aiosqlite cursor."""
        self._cursor = cursor

    @property
    def rowcount(self) -> int:
        """Number of rows affected by the last operation."""
        rc = self._cursor.rowcount
        return rc if rc is not None else -1

    @property
    def lastrowid(self) -> int | None:
        """Rowid of the last inserted row, if any."""
        return self._cursor.lastrowid

    async def fetchone(self) -> Row | None:
        """Fetch the next row, or None if exhausted."""
        return await self._cursor.fetchone()

    async def fetchall(self) -> list[Row]:
        """Fetch all remaining rows."""
        return list(await self._cursor.fetchall())


class SQLiteBackend:
    """SQLite implementation of the Database protocol.

    Passes all calls through to the underlying aiosqlite.Connection.
    aiosqlite runs every statement on one worker thread, so concurrent
    recall queries from the search fan-out are serialized safely.
    """

    def __init__(self, conn: aiosqlite.Connection) -> None:
        """Initialize with an aiosqlite connection."""
        self._conn = conn

    async def execute(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> Cursor:
        """Execute a single SQL statement and return a cursor."""
        cursor = await self._conn.execute(sql, params)
        return SQLiteCursor(cursor)

    async def executemany(self, sql: str, params_seq: list[tuple[Any, ...] | list[Any]]) -> None:
        """Execute a SQL statement for each set of parameters."""
        await self._conn.executemany(sql, params_seq)

    async def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements (DDL)."""
        await self._conn.executescript(sql)

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        await self._conn.close()

    async def apply_schema(self) -> None:
        """Apply the content schema and record its version."""
        from site_search.db.schema import apply_schema

        await apply_schema(self)
        logger.debug("Content schema applied")
