"""Database connection management."""

import logging
from pathlib import Path

import aiosqlite

from site_search.config import get_db_path
from site_search.db.backend import Database
from site_search.db.sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)


def sql_casefold(value: object) -> object:
    """SQL ``casefold(x)``: Unicode case folding for text, other values unchanged."""
    return value.casefold() if isinstance(value, str) else value


async def create_connection(db_path: Path | str | None = None) -> Database:
    """Create and initialize a content database connection.

    For in-memory databases, pass ":memory:".
    """
    db_path = str(db_path or get_db_path())

    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row

    # WAL lets readers proceed while the site writes view counts
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA foreign_keys=ON")
    # LIKE only folds ASCII; recall queries compare casefold(column)
    await conn.create_function("casefold", 1, sql_casefold, deterministic=True)

    db = SQLiteBackend(conn)
    await db.apply_schema()
    logger.debug("Opened content database %s", db_path)
    return db
