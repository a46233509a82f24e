"""FASTA protein file reader.

Header lines start with a marker character (``>`` by default). The accession
runs from just after the marker to the first accession end character (a space
by default); the remainder of the line is the description. Sequence lines are
concatenated until the next header or the end of the file.
"""

from __future__ import annotations

from .base import ProteinFileReader


class FastaFileReader(ProteinFileReader):
    def __init__(self, record_start_char: str = ">", accession_end_char: str = " ") -> None:
        if len(record_start_char) != 1 or len(accession_end_char) != 1:
            raise ValueError("FASTA marker characters must be single characters")
        super().__init__()
        self.record_start_char = record_start_char
        self.accession_end_char = accession_end_char
        self._pending_header: str | None = None

    def _on_open(self) -> None:
        self._pending_header = None

    def _parse_next_entry(self) -> bool:
        header = self._pending_header
        self._pending_header = None

        # Skip anything before the first header line
        while header is None:
            line = self._read_line()
            if line is None:
                return False
            if line.startswith(self.record_start_char):
                header = line

        self._parse_header(header)

        chunks: list[str] = []
        while True:
            line = self._read_line()
            if line is None:
                break
            if line.startswith(self.record_start_char):
                self._pending_header = line
                break
            stripped = line.strip()
            if stripped:
                chunks.append(stripped)
        self.sequence = "".join(chunks)
        return True

    def _parse_header(self, header: str) -> None:
        text = header[len(self.record_start_char):].strip()
        name, _, description = text.partition(self.accession_end_char)
        self.name = name.strip()
        self.description = description.strip()
