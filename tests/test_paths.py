import logging
import tempfile
from pathlib import Path

import pytest

from store import paths
from store.paths import (
    PERMISSION_PROBE_FILE_NAME,
    numbered_file_name,
    prepare_store_path,
    resolve_store_path,
)


def test_resolve_uses_writable_app_directory(tmp_path: Path) -> None:
    db_path = resolve_store_path("cache.db3", tmp_path)

    assert db_path == tmp_path / "cache.db3"
    assert not (tmp_path / PERMISSION_PROBE_FILE_NAME).exists()


def test_resolve_falls_back_to_temp_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    temp_dir = tmp_path / "temp"
    temp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_dir))

    db_path = resolve_store_path("cache.db3", tmp_path / "missing" / "dir")

    assert db_path == temp_dir / "cache.db3"
    assert list(temp_dir.iterdir()) == []


def test_resolve_falls_back_to_bare_name(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fail_mkstemp(*args: object, **kwargs: object) -> tuple[int, str]:
        raise PermissionError("no temp access")

    monkeypatch.setattr(paths.tempfile, "mkstemp", fail_mkstemp)

    db_path = resolve_store_path("cache.db3", tmp_path / "missing")

    assert db_path == Path("cache.db3")


def test_resolve_logs_probe_outcomes(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="store.paths"):
        resolve_store_path("cache.db3", tmp_path)

    assert any("Checking for write permission" in message for message in caplog.messages)
    assert any("SQLite DB path defined" in message for message in caplog.messages)


def test_numbered_file_name() -> None:
    assert numbered_file_name("tmpProteinInfoCache.db3", 0) == "tmpProteinInfoCache.db3"
    assert numbered_file_name("tmpProteinInfoCache.db3", 1) == "tmpProteinInfoCache1.db3"
    assert numbered_file_name("tmpProteinInfoCache.db3", 12) == "tmpProteinInfoCache12.db3"


def test_prepare_deletes_stale_file(tmp_path: Path) -> None:
    stale = tmp_path / "cache.db3"
    stale.write_text("old run", encoding="utf-8")

    db_path = prepare_store_path("cache.db3", tmp_path)

    assert db_path == stale
    assert not stale.exists()


def test_prepare_moves_to_next_name_when_stale_file_is_locked(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    locked = tmp_path / "cache.db3"
    locked.write_text("locked", encoding="utf-8")
    original_unlink = Path.unlink

    def unlink(self: Path, missing_ok: bool = False) -> None:
        if self == locked:
            raise PermissionError("file in use")
        original_unlink(self, missing_ok=missing_ok)

    monkeypatch.setattr(Path, "unlink", unlink)

    db_path = prepare_store_path("cache.db3", tmp_path)

    assert db_path == tmp_path / "cache1.db3"
    assert locked.exists()


def test_prepare_falls_back_to_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    for attempt in range(3):
        (tmp_path / numbered_file_name("cache.db3", attempt)).write_text("x", encoding="utf-8")
    original_unlink = Path.unlink

    def unlink(self: Path, missing_ok: bool = False) -> None:
        if self.name.startswith("cache"):
            raise PermissionError("file in use")
        original_unlink(self, missing_ok=missing_ok)

    monkeypatch.setattr(Path, "unlink", unlink)

    db_path = prepare_store_path("cache.db3", tmp_path, max_attempts=3)

    assert db_path == Path("cache.db3")
