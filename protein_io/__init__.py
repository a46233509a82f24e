"""
Protein IO Module

Readers for protein sequence databases.

This module provides:
- Abstract ProteinFileReader interface with byte-based progress
- FASTA reader with configurable header marker and accession separator
- Delimited text reader with configurable delimiter and column order
- Reader selection from options and file extension
"""

__version__ = "0.1.0"

from .base import ProteinFileReader
from .delimited import DelimitedFileReader
from .fasta import FastaFileReader
from .selection import FASTA_EXTENSIONS, create_reader, is_fasta_file

__all__ = [
    "ProteinFileReader",
    "DelimitedFileReader",
    "FastaFileReader",
    "FASTA_EXTENSIONS",
    "create_reader",
    "is_fasta_file",
]
