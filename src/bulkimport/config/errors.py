"""Configuration error definitions."""

from __future__ import annotations

from bulkimport.common.errors import BulkImportError


class ConfigurationError(BulkImportError):
    """Raised when configuration values are invalid."""


class JobFileError(ConfigurationError):
    """Raised when an import job file cannot be read or validated."""
