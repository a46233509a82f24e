"""
SQLite database utilities for the protein cache store.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from protein_core.schemas import StoreSchemaError

logger = logging.getLogger(__name__)

TABLE_NAME = "ProteinInfo"

SCHEMA_SQL = f"""
CREATE TABLE {TABLE_NAME} (
  Name TEXT,
  Description TEXT,
  Sequence TEXT,
  UniqueSequenceID INTEGER PRIMARY KEY,
  PercentCoverage REAL
);
"""

EXPECTED_COLUMNS = ("Name", "Description", "Sequence", "UniqueSequenceID", "PercentCoverage")


def connect(db_path: str | Path, disable_journaling: bool = False) -> sqlite3.Connection:
    """Open a SQLite connection in autocommit mode.

    Transactions are issued explicitly with BEGIN/COMMIT. With
    ``disable_journaling`` the rollback journal is switched off and
    synchronous writes are disabled, which is only acceptable because the
    cache is disposable scratch space.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Connecting to SQLite DB: {path}")
    connection = sqlite3.connect(str(path), isolation_level=None)
    connection.row_factory = sqlite3.Row
    if disable_journaling:
        logger.debug("Disabling journaling and setting synchronous mode to 0")
        _ = connection.execute("PRAGMA journal_mode = OFF")
        _ = connection.execute("PRAGMA synchronous = 0")
    return connection


def table_columns(connection: sqlite3.Connection) -> tuple[str, ...]:
    rows = connection.execute(f"PRAGMA table_info({TABLE_NAME})").fetchall()
    return tuple(str(row["name"]) for row in rows)


def initialize_schema(connection: sqlite3.Connection) -> None:
    """Create the protein table; an incompatible existing table is fatal."""
    existing = table_columns(connection)
    if existing:
        if tuple(column.lower() for column in existing) != tuple(
            column.lower() for column in EXPECTED_COLUMNS
        ):
            raise StoreSchemaError(
                f"Table {TABLE_NAME} already exists with columns {existing}; "
                f"expected {EXPECTED_COLUMNS}"
            )
        logger.debug(f"Table {TABLE_NAME} already present")
        return
    logger.debug(f"Creating table {TABLE_NAME}")
    _ = connection.executescript(SCHEMA_SQL)


def drop_schema(connection: sqlite3.Connection) -> None:
    _ = connection.execute(f"DROP TABLE IF EXISTS {TABLE_NAME}")
