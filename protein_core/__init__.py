"""
Protein Core Module

Data model, normalization and ingest orchestration for the protein cache.

This module provides:
- Validated options and protein record schemas
- Sequence normalization (symbol stripping, case folding, I/L unification)
- Status/warning/error/debug message events and caching progress reporting
- ProteinFileDataCache, which loads a protein file into the SQLite cache
"""

__version__ = "0.1.0"
