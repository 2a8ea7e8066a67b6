"""Entry implementation shared by the bundled sources."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from bulkimport.domain.text import trim_unicode

if TYPE_CHECKING:
    from collections.abc import Iterator


class RowEntry(Mapping[str, str]):
    """Read-only row keyed by source field name.

    Field names are trimmed; missing cells (``None``) are stored as empty
    strings so every field of the header is present.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[Any, Any]) -> None:
        self._data: dict[str, str] = {
            trim_unicode(key): value or ""
            for key, value in data.items()
            if key is not None and trim_unicode(key)
        }

    def is_empty(self) -> bool:
        return all(not trim_unicode(value) for value in self._data.values())

    def __getitem__(self, field: str) -> str:
        return self._data[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RowEntry({self._data!r})"
