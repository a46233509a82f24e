import sqlite3
from pathlib import Path

import pytest

from protein_core.schemas import CacheStateError, ProteinRecord, StoreSchemaError
from store.database import EXPECTED_COLUMNS, TABLE_NAME, connect, table_columns
from store.repository import ProteinStore, build_range_query


def _record(index: int) -> ProteinRecord:
    return ProteinRecord(
        name=f"P{index}",
        description=f"protein {index}",
        sequence="ACDEFGHIK"[: index % 9 + 1],
        unique_sequence_id=index,
    )


def _populated_store(tmp_path: Path, count: int = 10) -> ProteinStore:
    store = ProteinStore(tmp_path / "cache.db3")
    store.open(disable_journaling=True)
    store.create_schema()
    store.begin_bulk_insert()
    for index in range(count):
        store.insert(_record(index))
    assert store.commit() == count
    return store


def test_create_schema_builds_expected_table(tmp_path: Path) -> None:
    store = ProteinStore(tmp_path / "cache.db3")
    store.create_schema()

    assert table_columns(store.connection) == EXPECTED_COLUMNS
    store.close()


def test_create_schema_rejects_incompatible_table(tmp_path: Path) -> None:
    db_path = tmp_path / "cache.db3"
    connection = sqlite3.connect(str(db_path))
    connection.execute(f"CREATE TABLE {TABLE_NAME} (Other TEXT)")
    connection.commit()
    connection.close()

    store = ProteinStore(db_path)
    with pytest.raises(StoreSchemaError):
        store.create_schema()
    store.close()


def test_create_schema_replace_drops_old_rows(tmp_path: Path) -> None:
    store = _populated_store(tmp_path, count=3)

    store.create_schema(replace=True)

    assert store.count() == 0
    store.close()


def test_full_scan_returns_records_in_id_order(tmp_path: Path) -> None:
    store = _populated_store(tmp_path)

    records = list(store.read())

    assert [record.unique_sequence_id for record in records] == list(range(10))
    assert records[3] == _record(3)
    store.close()


def test_range_read_is_inclusive(tmp_path: Path) -> None:
    store = _populated_store(tmp_path)

    ids = [record.unique_sequence_id for record in store.read(2, 5)]

    assert ids == [2, 3, 4, 5]
    store.close()


def test_open_ended_read_from_start_id(tmp_path: Path) -> None:
    store = _populated_store(tmp_path)

    ids = [record.unique_sequence_id for record in store.read(7)]

    assert ids == [7, 8, 9]
    store.close()


def test_read_can_be_abandoned_early(tmp_path: Path) -> None:
    store = _populated_store(tmp_path)

    records = store.read()
    first = next(records)
    records.close()

    assert first.unique_sequence_id == 0
    assert store.count() == 10
    store.close()


def test_build_range_query_rejects_end_without_start() -> None:
    with pytest.raises(ValueError):
        build_range_query(None, 5)


def test_insert_requires_bulk_insert(tmp_path: Path) -> None:
    store = ProteinStore(tmp_path / "cache.db3")
    store.create_schema()

    with pytest.raises(CacheStateError):
        store.insert(_record(0))
    store.close()


def test_commit_restores_synchronous_mode(tmp_path: Path) -> None:
    store = _populated_store(tmp_path, count=1)

    synchronous = store.connection.execute("PRAGMA synchronous").fetchone()[0]

    assert synchronous == 1
    store.close()


def test_uncommitted_rows_are_not_visible_to_other_connections(tmp_path: Path) -> None:
    db_path = tmp_path / "cache.db3"
    store = ProteinStore(db_path)
    store.open(disable_journaling=True)
    store.create_schema()
    store.begin_bulk_insert()
    store.insert(_record(0))

    observer = connect(db_path)
    assert observer.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()[0] == 0
    observer.close()

    store.commit()
    observer = connect(db_path)
    assert observer.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()[0] == 1
    observer.close()
    store.close()


def test_discard_leaves_empty_table(tmp_path: Path) -> None:
    store = ProteinStore(tmp_path / "cache.db3")
    store.open(disable_journaling=True)
    store.create_schema()
    store.begin_bulk_insert()
    for index in range(5):
        store.insert(_record(index))

    store.discard()

    assert store.count() == 0
    assert store.in_bulk_insert is False
    store.close()


def test_update_percent_coverage(tmp_path: Path) -> None:
    store = _populated_store(tmp_path, count=3)

    assert store.update_percent_coverage(1, 0.5) is True
    assert store.update_percent_coverage(99, 0.5) is False
    with pytest.raises(ValueError):
        store.update_percent_coverage(1, 1.5)

    coverage = {record.unique_sequence_id: record.percent_coverage for record in store.read()}
    assert coverage == {0: 0.0, 1: 0.5, 2: 0.0}
    store.close()
