"""SQLAlchemy adapter package for bulkimport."""

from __future__ import annotations

from .identifiers import SqlAlchemyIdentifierStore
from .mappings import mapper_registry
from .vocabulary import SqlAlchemyVocabulary
from .writer import SqlAlchemyBulkWriteSink

__all__ = [
    "SqlAlchemyBulkWriteSink",
    "SqlAlchemyIdentifierStore",
    "SqlAlchemyVocabulary",
    "mapper_registry",
]
