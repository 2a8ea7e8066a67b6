"""Ports for looking up resources by identifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkimport.domain.model import ResourceType


@dataclass(frozen=True, slots=True)
class MatchRow:
    """A stored value that matched one of the queried identifiers."""

    identifier: str
    resource_id: int
    row_id: int


@runtime_checkable
class IdentifierStore(Protocol):
    """Read access to the backing store used by the identifier resolver.

    Row-returning methods must match values case-insensitively and return rows
    ordered by ascending ``(resource_id, row_id)``: the resolver relies on that
    order to break ties between duplicates.
    """

    def find_existing_ids(
        self,
        ids: Sequence[int],
        resource_type: ResourceType | None = None,
    ) -> list[int]: ...

    def find_property_values(
        self,
        values: Sequence[str],
        property_id: int,
        resource_type: ResourceType | None = None,
    ) -> list[MatchRow]: ...

    def find_media_sources(
        self,
        sources: Sequence[str],
        ingester: str,
        item_id: int | None = None,
    ) -> list[MatchRow]: ...
