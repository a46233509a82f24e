"""
Summarizer Module

Configuration and command-line entry points for the protein cache.

This module provides:
- YAML loading and saving of CacheOptions
- Typer CLI with a tqdm progress bar for caching a protein file
"""

__version__ = "0.1.0"
