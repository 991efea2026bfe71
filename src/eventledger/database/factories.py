"""Database factory functions for creating database instances."""

import os
from typing import Optional

from eventledger.config import default_db_path, load_settings
from eventledger.database.memory import MemoryDatabase
from eventledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(
    database_path: Optional[str] = None,
    read_retries: Optional[int] = None,
    read_backoff: Optional[float] = None,
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks EVENTLEDGER_DB_PATH
            environment variable, then defaults to ~/.eventledger/eventledger.db
        read_retries: Retry count for failed reads, defaults to EVENTLEDGER_READ_RETRIES
        read_backoff: Base backoff in seconds, defaults to EVENTLEDGER_READ_BACKOFF

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    settings = load_settings()

    if database_path is None:
        database_path = os.environ.get("EVENTLEDGER_DB_PATH")

    if database_path is None:
        database_path = default_db_path()

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(
        database_url,
        read_retries=settings.read_retries if read_retries is None else read_retries,
        read_backoff=settings.read_backoff if read_backoff is None else read_backoff,
    )


def create_memory_database() -> MemoryDatabase:
    """Create an empty in-memory document store."""
    return MemoryDatabase()
