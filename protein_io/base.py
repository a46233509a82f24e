"""Base protein file reader interface."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class ProteinFileReader(ABC):
    """Forward-only reader over the protein entries of a file.

    Subclasses implement :meth:`_parse_next_entry`, which fills ``name``,
    ``description`` and ``sequence`` and returns False once the input is
    exhausted. Progress is measured in bytes consumed.
    """

    def __init__(self) -> None:
        self.file_path: Path | None = None
        self._handle: BinaryIO | None = None
        self._file_size = 0
        self._bytes_read = 0
        self._lines_read = 0
        self._clear_entry()
        self.last_error: Exception | None = None

    def _clear_entry(self) -> None:
        self.name = ""
        self.description = ""
        self.sequence = ""

    @property
    def lines_read(self) -> int:
        return self._lines_read

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open_file(self, path: str | Path) -> bool:
        self.close_file()
        path = Path(path)
        try:
            self._handle = open(path, "rb")
            self._file_size = os.path.getsize(path)
        except OSError as e:
            logger.error(f"Unable to open protein file {path}: {e}")
            self._handle = None
            return False
        self.file_path = path
        self._bytes_read = 0
        self._lines_read = 0
        self._clear_entry()
        self.last_error = None
        self._on_open()
        return True

    def _on_open(self) -> None:
        """Hook for subclasses to reset parser state."""

    def close_file(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def read_next_entry(self) -> bool:
        """Advance to the next entry; False at end of input or on a read error.

        A read error is kept in ``last_error`` so callers can tell it apart
        from the end of the file.
        """
        if self._handle is None:
            return False
        self._clear_entry()
        try:
            return self._parse_next_entry()
        except (OSError, ValueError) as e:
            self.last_error = e
            logger.error(f"Error reading {self.file_path} near line {self._lines_read}: {e}")
            return False

    @abstractmethod
    def _parse_next_entry(self) -> bool:
        """Populate the current entry from the input."""

    def percent_file_processed(self) -> float:
        if self._file_size <= 0:
            return 100.0
        return min(100.0, self._bytes_read / self._file_size * 100.0)

    def _read_line(self) -> str | None:
        """Return the next line without its line terminator, or None at EOF."""
        assert self._handle is not None
        raw = self._handle.readline()
        if not raw:
            return None
        self._bytes_read += len(raw)
        self._lines_read += 1
        encoding = "utf-8-sig" if self._lines_read == 1 else "utf-8"
        return raw.decode(encoding, errors="replace").rstrip("\r\n")

    def __enter__(self) -> "ProteinFileReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close_file()
