"""Base repository class."""

from pathlib import Path
from typing import Any

import duckdb
from loguru import logger

from app.repositories.db import connect, get_db


class BaseRepository:
    """Base repository over a DuckDB connection.

    Without ``db_path`` the thread-local connection to the configured
    database is shared; with it the repository owns its own connection.
    """

    def __init__(self, db_path: str | Path | None = None, read_only: bool = True):
        self._read_only = read_only
        self._owned = db_path is not None
        self._db: duckdb.DuckDBPyConnection = connect(db_path, read_only) if self._owned else get_db(read_only)
        logger.debug("{} initialized", self.__class__.__name__)

    def close(self) -> None:
        """Close the connection if this repository opened it."""
        if self._owned:
            self._db.close()

    def _require_writable(self, action: str) -> None:
        if self._read_only:
            raise RuntimeError(f"Cannot {action} in read-only mode")

    def execute(self, query: str, params: list | None = None) -> Any:
        """Execute SQL query."""
        if params:
            return self._db.execute(query, params)
        return self._db.execute(query)

    def fetchall(self, query: str, params: list | None = None) -> list:
        """Execute and fetch all rows."""
        return self.execute(query, params).fetchall()

    def fetchone(self, query: str, params: list | None = None) -> Any:
        """Execute and fetch one row."""
        return self.execute(query, params).fetchone()
