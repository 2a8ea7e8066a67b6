"""Ports describing where import entries come from."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator


@runtime_checkable
class Entry(Protocol):
    """One normalized source row: source field name -> raw cell value."""

    def is_empty(self) -> bool: ...

    def __contains__(self, field: object) -> bool: ...

    def __getitem__(self, field: str) -> str: ...

    def get(self, field: str, default: str | None = None) -> str | None: ...


@runtime_checkable
class EntrySource(Protocol):
    """Ordered stream of entries plus the multi-value separator to apply."""

    @property
    def separator(self) -> str: ...

    def __iter__(self) -> Iterator[Entry]: ...
