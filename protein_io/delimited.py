"""Delimited-text protein file reader (one protein per line)."""

from __future__ import annotations

import logging

from protein_core.schemas import DelimitedFileFormat

from .base import ProteinFileReader

logger = logging.getLogger(__name__)


class DelimitedFileReader(ProteinFileReader):
    def __init__(
        self,
        delimiter: str = "\t",
        file_format: DelimitedFileFormat = DelimitedFileFormat.NAME_DESCRIPTION_SEQUENCE,
        skip_first_line: bool = False,
    ) -> None:
        if len(delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        super().__init__()
        self.delimiter = delimiter
        self.file_format = DelimitedFileFormat(file_format)
        self.skip_first_line = skip_first_line
        self.lines_skipped = 0

    def _on_open(self) -> None:
        self.lines_skipped = 0

    def _parse_next_entry(self) -> bool:
        columns = self.file_format.columns
        while True:
            line = self._read_line()
            if line is None:
                return False
            if self.skip_first_line and self.lines_read == 1:
                continue
            if not line.strip():
                continue

            fields = line.split(self.delimiter)
            if len(fields) < len(columns):
                self.lines_skipped += 1
                logger.debug(
                    f"Skipping line {self.lines_read}: expected {len(columns)} columns, "
                    f"found {len(fields)}"
                )
                continue

            values = dict(zip(columns, (field.strip() for field in fields)))
            self.name = values.get("name", "")
            self.description = values.get("description", "")
            self.sequence = values["sequence"]
            return True
