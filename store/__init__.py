"""
Store Module

Persistent SQLite cache for protein records.

This module provides:
- Single-table schema keyed by UniqueSequenceID
- Transactional bulk insert with journaling disabled for throughput
- Lazy full-scan and ID-range reads
- Writable cache path resolution with temp-directory fallback
- Store lifecycle with a retrying, backoff-based file deletion
"""

__version__ = "0.1.0"
