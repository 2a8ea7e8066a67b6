"""Identifier queries and their construction from identifier names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bulkimport.domain.model import IdentifierKind, ResourceType
from bulkimport.domain.text import trim_unicode

from .names import (
    MEDIA_INGESTERS,
    UNSUPPORTED_INGESTERS,
    MediaSourceName,
    UnsupportedIdentifierQuery,
    is_internal_id_name,
    numeric_name,
    parse_resource_type,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bulkimport.domain.ports import NameLookup

    from .names import IdentifierName


@dataclass(frozen=True, slots=True)
class IdentifierQuery:
    """A deduplicated set of identifiers and how to look them up."""

    identifiers: tuple[str, ...]
    kind: IdentifierKind
    property_id: int | None = None
    ingester: str | None = None
    item_id: int | None = None
    resource_type: ResourceType | None = None

    def __post_init__(self) -> None:
        if self.kind is IdentifierKind.PROPERTY and self.property_id is None:
            raise ValueError("Property identifier queries require a property id")
        if self.kind is IdentifierKind.MEDIA_SOURCE and not self.ingester:
            raise ValueError("Media source identifier queries require an ingester")


def clean_identifiers(values: Iterable[str]) -> tuple[str, ...]:
    """Trim, drop empty values and deduplicate, keeping first-seen order."""

    trimmed = (trim_unicode(value) for value in values if value is not None)
    return tuple(dict.fromkeys(value for value in trimmed if value))


def build_query(
    identifiers: Iterable[str],
    identifier_name: IdentifierName,
    lookup: NameLookup,
    *,
    resource_type: ResourceType | str | None = None,
) -> IdentifierQuery:
    """Translate an identifier name into a concrete query.

    Raises ``UnsupportedIdentifierQuery`` when the name or the resource type
    cannot be resolved to anything the store understands.
    """

    cleaned = clean_identifiers(identifiers)

    if isinstance(identifier_name, MediaSourceName):
        return _media_source_query(cleaned, identifier_name.ingester, identifier_name.item_id)

    if is_internal_id_name(identifier_name):
        return IdentifierQuery(
            identifiers=cleaned,
            kind=IdentifierKind.INTERNAL_ID,
            resource_type=parse_resource_type(resource_type),
        )

    property_id = numeric_name(identifier_name)
    if property_id is None and isinstance(identifier_name, str):
        property_id = lookup.find_property_id(identifier_name)
        if property_id is None and identifier_name in MEDIA_INGESTERS:
            return _media_source_query(cleaned, identifier_name, None)
    if property_id is None:
        raise UnsupportedIdentifierQuery(f"Unknown identifier name: {identifier_name!r}")

    return IdentifierQuery(
        identifiers=cleaned,
        kind=IdentifierKind.PROPERTY,
        property_id=property_id,
        resource_type=parse_resource_type(resource_type),
    )


def _media_source_query(
    identifiers: tuple[str, ...],
    ingester: str,
    item_id: int | None,
) -> IdentifierQuery:
    if not ingester or ingester in UNSUPPORTED_INGESTERS:
        raise UnsupportedIdentifierQuery(f"Media ingester {ingester!r} has no source to match")
    return IdentifierQuery(
        identifiers=identifiers,
        kind=IdentifierKind.MEDIA_SOURCE,
        ingester=ingester,
        item_id=item_id,
        resource_type=ResourceType.MEDIA,
    )
