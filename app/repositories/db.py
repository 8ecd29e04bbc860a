"""DuckDB connection management."""

import threading
from pathlib import Path

import duckdb
from loguru import logger

from app.models import ALL_DDL
from settings import DB_PATH

_local = threading.local()


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create all tables (idempotent - DDL uses IF NOT EXISTS)."""
    for ddl in ALL_DDL:
        conn.execute(ddl)
    logger.debug("DB tables initialized")


def connect(db_path: str | Path | None = None, read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Open a connection; writable connections get the tables created."""
    path = str(db_path or DB_PATH)
    if read_only and not Path(path).exists():
        logger.warning("DB not found: {}. Creating empty DB.", path)
        bootstrap = duckdb.connect(path)
        init_tables(bootstrap)
        bootstrap.close()

    conn = duckdb.connect(path, read_only=read_only)
    if not read_only:
        init_tables(conn)
    logger.debug("DB connected: {} (read_only={})", path, read_only)
    return conn


def get_db(read_only: bool = True) -> duckdb.DuckDBPyConnection:
    """Get thread-local connection to the configured database."""
    if getattr(_local, "conn", None) is None:
        _local.conn = connect(read_only=read_only)
    return _local.conn


def close_db() -> None:
    """Close thread-local connection."""
    if getattr(_local, "conn", None) is not None:
        _local.conn.close()
        _local.conn = None
        logger.debug("DB connection closed")
