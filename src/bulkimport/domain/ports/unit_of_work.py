"""Transaction boundary the import runner commits or rolls back per batch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from .identifiers import IdentifierStore
    from .vocabulary import NameLookup
    from .writing import BulkWriteSink


@runtime_checkable
class RepositoryCollection(Protocol):
    """Repositories that share one transaction."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Opens a transaction over ``repositories``; leaving on an error rolls it back."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class ImportRepositories(RepositoryCollection):
    """Everything an import run reads from and writes to."""

    identifiers: IdentifierStore
    vocabulary: NameLookup
    writer: BulkWriteSink


type ImportUnitOfWork = UnitOfWork[ImportRepositories]
