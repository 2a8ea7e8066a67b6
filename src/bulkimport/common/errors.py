"""Root exception hierarchy shared by every layer."""

from __future__ import annotations


class BulkImportError(RuntimeError):
    """Base class for errors raised by the import engine."""


class ResolutionError(BulkImportError):
    """Raised when the identifier store cannot be queried."""


class WriteError(BulkImportError):
    """Raised when the bulk write sink fails to create resources."""
