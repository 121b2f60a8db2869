"""Database backend protocol for the content store.

The content store and its query helpers program against these protocols.
A backend only has to run SQLite-flavored SQL with ``?`` placeholders;
the ranking engine never sees a connection directly.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Row(Protocol):
    """A database row supporting both named and positional access."""

    def __getitem__(self, key: str | int) -> Any:
        """Get a column value by name or position."""
        ...

    def keys(self) -> Any:
        """Return column names."""
        ...


@runtime_checkable
class Cursor(Protocol):
    """Async cursor returned by Database.execute()."""

    @property
    def rowcount(self) -> int:
        """Number of rows affected by the last operation."""
        ...

    @property
    def lastrowid(self) -> int | None:
        """Rowid of the last inserted row, if any."""
        ...

    async def fetchone(self) -> Row | None:
        """Fetch the next row, or None if exhausted."""
        ...

    async def fetchall(self) -> list[Row]:
        """Fetch all remaining rows."""
        ...


@runtime_checkable
class Database(Protocol):
    """Async database backend used by the content store."""

    async def execute(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> Cursor:
        """Execute a single SQL statement and return a cursor."""
        ...

    async def executemany(self, sql: str, params_seq: list[tuple[Any, ...] | list[Any]]) -> None:
        """Execute a SQL statement for each set of parameters."""
        ...

    async def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements (DDL)."""
        ...

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def close(self) -> None:
        """Close the database connection."""
        ...
