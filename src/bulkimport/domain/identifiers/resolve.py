"""Identifier resolution.

Responsibilities of this stage:
- turn user-facing identifiers (internal ids, property values, media sources)
  into resource ids
- keep one result per queried identifier, in query order
- break ties between duplicates deterministically

Tie-break policy for property values and media sources: the store returns
matching rows ordered by ``(resource_id, row_id)``. For each identifier the
first row whose value is equal (case-sensitive) wins; when there is none, the
first row equal after lower-casing wins; otherwise the identifier maps to
``None``.

Unsupported name/resource type combinations resolve to an empty mapping
instead of raising. Store failures propagate as ``ResolutionError``.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from bulkimport.domain.model import IdentifierKind

from .names import UnsupportedIdentifierQuery
from .query import IdentifierQuery, build_query, clean_identifiers

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from bulkimport.domain.model import ResourceType
    from bulkimport.domain.ports import IdentifierStore, MatchRow, NameLookup

    from .names import IdentifierName

type Resolution = dict[str, int | None]

log = getLogger(__name__)


class IdentifierResolver:
    """Resolve identifiers against an ``IdentifierStore``."""

    def __init__(self, store: IdentifierStore, lookup: NameLookup) -> None:
        self.store = store
        self.lookup = lookup

    def find(
        self,
        identifiers: Iterable[str],
        identifier_name: IdentifierName,
        resource_type: ResourceType | str | None = None,
    ) -> Resolution:
        """Resolve ``identifiers`` named by ``identifier_name``.

        Identifiers are trimmed and deduplicated first; an empty set returns an
        empty mapping without querying the store.
        """

        cleaned = clean_identifiers(identifiers)
        if not cleaned:
            return {}
        try:
            query = build_query(cleaned, identifier_name, self.lookup, resource_type=resource_type)
        except UnsupportedIdentifierQuery as exc:
            log.debug("Identifier query short-circuited: %s", exc)
            return {}
        return self.resolve(query)

    def find_one(
        self,
        identifier: str,
        identifier_name: IdentifierName,
        resource_type: ResourceType | str | None = None,
    ) -> int | None:
        """Resolve a single identifier, returning its id or ``None``."""

        result = self.find([identifier], identifier_name, resource_type)
        return next(iter(result.values()), None)

    def resolve(self, query: IdentifierQuery) -> Resolution:
        if not query.identifiers:
            return {}

        if query.kind is IdentifierKind.INTERNAL_ID:
            return self._resolve_internal_ids(query)

        rows: list[MatchRow]
        match query:
            case IdentifierQuery(kind=IdentifierKind.PROPERTY, property_id=int() as property_id):
                rows = self.store.find_property_values(
                    query.identifiers, property_id, query.resource_type
                )
            case IdentifierQuery(kind=IdentifierKind.MEDIA_SOURCE, ingester=str() as ingester):
                rows = self.store.find_media_sources(query.identifiers, ingester, query.item_id)
            case _:
                raise ValueError(f"Cannot resolve identifier query of kind {query.kind}")
        return pick_matches(query.identifiers, rows)

    def _resolve_internal_ids(self, query: IdentifierQuery) -> Resolution:
        candidates = {identifier: _as_id(identifier) for identifier in query.identifiers}
        ids = sorted({value for value in candidates.values() if value is not None})
        found = set(self.store.find_existing_ids(ids, query.resource_type)) if ids else set[int]()
        return {
            identifier: value if value in found else None
            for identifier, value in candidates.items()
        }


def pick_matches(identifiers: Sequence[str], rows: Sequence[MatchRow]) -> Resolution:
    """Apply the tie-break policy to ordered store rows."""

    exact: dict[str, int] = {}
    folded: dict[str, int] = {}
    for row in rows:
        exact.setdefault(row.identifier, row.resource_id)
        folded.setdefault(row.identifier.lower(), row.resource_id)

    result: Resolution = {}
    for identifier in identifiers:
        match = exact.get(identifier)
        if match is None:
            match = folded.get(identifier.lower())
        result[identifier] = match
    return result


def _as_id(identifier: str) -> int | None:
    if not identifier.isdecimal():
        return None
    value = int(identifier)
    return value or None
