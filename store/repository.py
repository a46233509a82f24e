"""
SQLite-backed protein record store.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Generator
from pathlib import Path
from typing import cast

from protein_core.schemas import CacheStateError, ProteinRecord

from .database import TABLE_NAME, connect, drop_schema, initialize_schema

logger = logging.getLogger(__name__)

_SELECT_SQL = (
    "SELECT UniqueSequenceID, Name, Description, Sequence, PercentCoverage"
    f" FROM {TABLE_NAME}"
)

_INSERT_SQL = (
    f"INSERT INTO {TABLE_NAME} (Name, Description, Sequence, UniqueSequenceID, PercentCoverage)"
    " VALUES (?, ?, ?, ?, ?)"
)


def _record_from_row(row: sqlite3.Row) -> ProteinRecord:
    return ProteinRecord(
        unique_sequence_id=int(cast(int, row["UniqueSequenceID"])),
        name=str(row["Name"] or ""),
        description=str(row["Description"] or ""),
        sequence=str(row["Sequence"] or ""),
        percent_coverage=float(cast(float, row["PercentCoverage"] or 0.0)),
    )


def build_range_query(
    start_id: int | None = None, end_id: int | None = None
) -> tuple[str, tuple[int, ...]]:
    """SQL for a full scan, an open-ended scan from ``start_id`` or an inclusive range."""
    if start_id is None and end_id is not None:
        raise ValueError("end_id requires start_id")
    if start_id is not None and start_id < 0:
        raise ValueError("start_id must be non-negative")
    if start_id is None:
        return f"{_SELECT_SQL} ORDER BY UniqueSequenceID", ()
    if end_id is None:
        return f"{_SELECT_SQL} WHERE UniqueSequenceID >= ? ORDER BY UniqueSequenceID", (start_id,)
    return (
        f"{_SELECT_SQL} WHERE UniqueSequenceID BETWEEN ? AND ? ORDER BY UniqueSequenceID",
        (start_id, end_id),
    )


class ProteinStore:
    """Open connection to one protein cache file plus its path."""

    db_path: Path

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._connection: sqlite3.Connection | None = None
        self._in_bulk_insert = False
        self._inserted = 0

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    @property
    def in_bulk_insert(self) -> bool:
        return self._in_bulk_insert

    def open(self, disable_journaling: bool = False) -> None:
        if self._connection is None:
            self._connection = connect(self.db_path, disable_journaling=disable_journaling)

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self.open()
        return cast(sqlite3.Connection, self._connection)

    def create_schema(self, replace: bool = False) -> None:
        if replace:
            drop_schema(self.connection)
        initialize_schema(self.connection)

    def begin_bulk_insert(self) -> None:
        """Open the single write transaction used for a whole ingest run."""
        if self._in_bulk_insert:
            raise CacheStateError("A bulk insert is already in progress")
        connection = self.connection
        _ = connection.execute("PRAGMA journal_mode = OFF")
        _ = connection.execute("PRAGMA synchronous = 0")
        _ = connection.execute("BEGIN")
        self._in_bulk_insert = True
        self._inserted = 0

    def insert(self, record: ProteinRecord) -> None:
        if not self._in_bulk_insert:
            raise CacheStateError("insert() requires begin_bulk_insert()")
        _ = self.connection.execute(
            _INSERT_SQL,
            (
                record.name,
                record.description,
                record.sequence,
                record.unique_sequence_id,
                record.percent_coverage,
            ),
        )
        self._inserted += 1

    def commit(self) -> int:
        """Commit the bulk insert and return the number of rows inserted."""
        if not self._in_bulk_insert:
            raise CacheStateError("commit() requires begin_bulk_insert()")
        connection = self.connection
        _ = connection.execute("COMMIT")
        self._in_bulk_insert = False
        _ = connection.execute("PRAGMA synchronous = 1")
        logger.debug(f"Committed {self._inserted} rows to {self.db_path}")
        return self._inserted

    def discard(self) -> None:
        """Abandon the bulk insert, leaving an empty table.

        With the journal disabled a rollback cannot be relied on to undo
        rows already written, so the table is emptied explicitly.
        """
        if not self._in_bulk_insert:
            return
        connection = self.connection
        if connection.in_transaction:
            _ = connection.execute("ROLLBACK")
        self._in_bulk_insert = False
        _ = connection.execute(f"DELETE FROM {TABLE_NAME}")
        _ = connection.execute("PRAGMA synchronous = 1")
        logger.debug(f"Discarded {self._inserted} uncommitted rows from {self.db_path}")
        self._inserted = 0

    def read(
        self, start_id: int | None = None, end_id: int | None = None
    ) -> Generator[ProteinRecord, None, None]:
        """Lazily stream records ordered by UniqueSequenceID.

        The cursor is closed when the generator is exhausted or closed.
        """
        sql, params = build_range_query(start_id, end_id)
        logger.debug(f"Running query {sql} {params}")
        cursor = self.connection.execute(sql, params)
        return self._iter_rows(cursor)

    def _iter_rows(self, cursor: sqlite3.Cursor) -> Generator[ProteinRecord, None, None]:
        try:
            for row in cursor:
                yield _record_from_row(cast(sqlite3.Row, row))
        finally:
            cursor.close()

    def count(self) -> int:
        row = cast(
            sqlite3.Row | None,
            self.connection.execute(f"SELECT COUNT(*) AS count FROM {TABLE_NAME}").fetchone(),
        )
        return int(row["count"]) if row is not None else 0

    def update_percent_coverage(self, unique_sequence_id: int, percent_coverage: float) -> bool:
        """Store a coverage value in [0, 1]; False when the ID is unknown."""
        if not 0.0 <= percent_coverage <= 1.0:
            raise ValueError("percent_coverage must be between 0 and 1")
        if self._in_bulk_insert:
            raise CacheStateError("Coverage cannot be written during a bulk insert")
        cursor = self.connection.execute(
            f"UPDATE {TABLE_NAME} SET PercentCoverage = ? WHERE UniqueSequenceID = ?",
            (percent_coverage, unique_sequence_id),
        )
        return cursor.rowcount == 1

    def close(self) -> None:
        if self._connection is None:
            return
        if self._in_bulk_insert:
            self.discard()
        logger.debug(f"Closing SQLite connection to {self.db_path}")
        self._connection.close()
        self._connection = None
