"""Database connection and schema management."""

from site_search.db.backend import Cursor, Database, Row
from site_search.db.sqlite_backend import SQLiteBackend

__all__ = ["Cursor", "Database", "Row", "SQLiteBackend"]
