"""Choose the reader variant for a protein input file."""

from __future__ import annotations

import logging
from pathlib import Path

from protein_core.schemas import CacheOptions

from .base import ProteinFileReader
from .delimited import DelimitedFileReader
from .fasta import FastaFileReader

logger = logging.getLogger(__name__)

FASTA_EXTENSIONS = (".fasta", ".fsa", ".faa")


def is_fasta_file(path: str | Path) -> bool:
    """True when the file extension is .fasta, .fsa or .faa (any case)."""
    return Path(path).suffix.lower() in FASTA_EXTENSIONS


def use_fasta_reader(path: str | Path, options: CacheOptions) -> bool:
    if options.assume_fasta:
        return True
    if options.assume_delimited:
        return False
    if not is_fasta_file(path):
        logger.debug(f"Extension of {path} is not one of {FASTA_EXTENSIONS}; reading it as FASTA")
    return True


def create_reader(path: str | Path, options: CacheOptions) -> ProteinFileReader:
    if use_fasta_reader(path, options):
        return FastaFileReader(
            record_start_char=options.fasta.record_start_char,
            accession_end_char=options.fasta.accession_end_char,
        )
    return DelimitedFileReader(
        delimiter=options.delimiter,
        file_format=options.delimited_format,
        skip_first_line=options.skip_header_line,
    )
