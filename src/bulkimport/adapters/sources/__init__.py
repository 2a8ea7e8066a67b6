"""Entry sources: delimited files and in-memory rows."""

from __future__ import annotations

from .csv_source import CsvEntrySource
from .entries import RowEntry
from .memory import MemoryEntrySource

__all__ = ["CsvEntrySource", "MemoryEntrySource", "RowEntry"]
