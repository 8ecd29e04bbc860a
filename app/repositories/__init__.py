"""Repositories package - data access layer for stored simulation results."""

from app.repositories.base import BaseRepository
from app.repositories.db import close_db, connect, get_db, init_tables
from app.repositories.results import ResultRepository

__all__ = [
    # DB
    "connect",
    "get_db",
    "close_db",
    "init_tables",
    # Base
    "BaseRepository",
    # Results
    "ResultRepository",
]
