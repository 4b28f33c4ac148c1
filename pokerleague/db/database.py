"""SQLite database helpers."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from pokerleague.settings import get_db_path

from .schema import initialize_schema

BUSY_TIMEOUT_SECONDS = 10.0


def get_default_database_path() -> Path:
    """Return the configured database path (per-user data directory by default)."""
    return get_db_path()


def _configure_connection(connection: sqlite3.Connection) -> None:
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Create a SQLite connection and ensure schema exists."""
    if db_path is None:
        db_path = get_default_database_path()

    connection = sqlite3.connect(str(db_path), timeout=BUSY_TIMEOUT_SECONDS)
    _configure_connection(connection)
    initialize_schema(connection)
    return connection


@contextmanager
def write_transaction(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the block as one serializable write transaction.

    ``BEGIN IMMEDIATE`` takes the database write lock before the first read,
    so reads performed inside the block cannot be invalidated by another
    writer before the block commits. Any exception rolls everything back.
    """
    connection.execute("BEGIN IMMEDIATE")
    try:
        yield connection
    except BaseException:
        connection.rollback()
        raise
    else:
        connection.commit()
