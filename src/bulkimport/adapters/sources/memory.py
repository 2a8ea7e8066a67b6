"""In-memory entry source, for programmatic imports and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entries import RowEntry

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence


@dataclass(frozen=True, slots=True)
class MemoryEntrySource:
    rows: Sequence[Mapping[str, str | None]] = field(default_factory=tuple)
    separator: str = ""

    def __iter__(self) -> Iterator[RowEntry]:
        for row in self.rows:
            yield RowEntry(dict(row))
