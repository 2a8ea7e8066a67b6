"""Ports (protocols) the import engine depends on."""

from __future__ import annotations

from .entries import Entry, EntrySource
from .identifiers import IdentifierStore, MatchRow
from .unit_of_work import ImportRepositories, ImportUnitOfWork, RepositoryCollection, UnitOfWork
from .vocabulary import AutoMappedField, NameLookup
from .writing import BulkWriteSink

__all__ = [
    "AutoMappedField",
    "BulkWriteSink",
    "Entry",
    "EntrySource",
    "IdentifierStore",
    "ImportRepositories",
    "ImportUnitOfWork",
    "MatchRow",
    "NameLookup",
    "RepositoryCollection",
    "UnitOfWork",
]
