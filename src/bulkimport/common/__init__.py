from __future__ import annotations

from .errors import BulkImportError, ResolutionError, WriteError
from .reporting import RunReporter, render

__all__ = [
    "BulkImportError",
    "ResolutionError",
    "RunReporter",
    "WriteError",
    "render",
]
