"""Locate a writable directory for the protein cache file."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

PERMISSION_PROBE_FILE_NAME = "TempFileToTestFileIOPermissions.tmp"
MAX_FILE_CREATE_ATTEMPTS = 10


def default_app_directory() -> Path:
    """Directory that contains the installed packages."""
    return Path(__file__).resolve().parent.parent


def _probe_app_directory(directory: Path) -> bool:
    probe_path = directory / PERMISSION_PROBE_FILE_NAME
    logger.debug(f"Checking for write permission by creating file {probe_path}")
    try:
        with open(probe_path, "w", encoding="utf-8") as f:
            f.write("Test\n")
    except OSError as e:
        logger.debug(f" ... unable to create the file: {e}")
        return False
    try:
        logger.debug(f"Deleting {probe_path}")
        probe_path.unlink()
    except OSError as e:
        logger.debug(f" ... unable to delete the probe file: {e}")
    return True


def _probe_temp_directory() -> Path | None:
    try:
        handle, temp_path = tempfile.mkstemp()
    except OSError as e:
        logger.debug(f" ... unable to create a file in the temp directory: {e}")
        return None
    logger.debug(f"Created file in user's temp directory: {temp_path}")
    try:
        os.close(handle)
        os.remove(temp_path)
    except OSError as e:
        logger.debug(f" ... unable to delete {temp_path}: {e}")
    return Path(temp_path).parent


def resolve_store_path(file_name: str, app_directory: str | Path | None = None) -> Path:
    """Place ``file_name`` beside the application, in the temp directory, or bare.

    Never raises: each failed probe falls through to the next location.
    """
    directory = Path(app_directory) if app_directory is not None else default_app_directory()
    if _probe_app_directory(directory):
        db_path = directory / file_name
    else:
        temp_directory = _probe_temp_directory()
        db_path = temp_directory / file_name if temp_directory is not None else Path(file_name)
    logger.debug(f" SQLite DB path defined: {db_path}")
    return db_path


def numbered_file_name(base_name: str, attempt: int) -> str:
    """``base.ext`` for attempt 0, then ``base1.ext``, ``base2.ext``, ..."""
    if attempt == 0:
        return base_name
    path = Path(base_name)
    return f"{path.stem}{attempt}{path.suffix}"


def prepare_store_path(
    base_name: str,
    app_directory: str | Path | None = None,
    max_attempts: int = MAX_FILE_CREATE_ATTEMPTS,
) -> Path:
    """Resolve a store path whose file does not exist yet.

    A stale file left by an earlier run is deleted; when it cannot be deleted
    the next numbered name is tried. If every attempt fails the bare file name
    in the current working directory is returned.
    """
    for attempt in range(max_attempts):
        db_path = resolve_store_path(numbered_file_name(base_name, attempt), app_directory)
        try:
            if db_path.exists():
                logger.debug(f"Deleting stale cache file {db_path}")
                db_path.unlink()
        except OSError as e:
            logger.warning(f"Unable to delete stale cache file {db_path}: {e}")
            continue
        if not db_path.exists():
            return db_path
    fallback = Path(base_name)
    logger.warning(
        f"No usable cache file name after {max_attempts} attempts; using {fallback} in the working directory"
    )
    return fallback
