"""Conversion of raw cell values into typed property values.

One converter per ``ValueKind``; the kind comes from the compiled ``ValueSpec``
so no datatype string is inspected per entry.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Final

from bulkimport.domain.model import (
    LiteralValue,
    ResourceType,
    ResourceValue,
    UriValue,
    ValueKind,
)

if TYPE_CHECKING:
    from bulkimport.domain.model import PropertyValue, ValueSpec

type ResourceLookup = Callable[[str, ResourceType | None], int | None]
type Converter = Callable[[ValueSpec, str, ResourceLookup], PropertyValue | None]

RESOURCE_TYPE_BY_DATATYPE: Final[dict[str, ResourceType | None]] = {
    "resource": None,
    "resource:item": ResourceType.ITEMS,
    "resource:itemset": ResourceType.ITEM_SETS,
    "resource:media": ResourceType.MEDIA,
}


def to_literal(spec: ValueSpec, raw: str, _lookup: ResourceLookup | None = None) -> LiteralValue:
    return LiteralValue(
        property_id=spec.property_id,
        datatype=spec.datatype,
        value=raw,
        language=spec.language,
        is_public=spec.is_public,
    )


def to_uri(spec: ValueSpec, raw: str, _lookup: ResourceLookup | None = None) -> UriValue:
    return UriValue(
        property_id=spec.property_id,
        datatype=spec.datatype,
        uri=raw,
        is_public=spec.is_public,
    )


def to_resource(spec: ValueSpec, raw: str, lookup: ResourceLookup) -> ResourceValue | None:
    """Link to another resource; ``None`` when ``raw`` identifies nothing."""

    resource_id = lookup(raw, RESOURCE_TYPE_BY_DATATYPE.get(spec.datatype))
    if resource_id is None:
        return None
    return ResourceValue(
        property_id=spec.property_id,
        datatype=spec.datatype,
        resource_id=resource_id,
        is_public=spec.is_public,
    )


CONVERTERS: Final[dict[ValueKind, Converter]] = {
    ValueKind.LITERAL: to_literal,
    ValueKind.URI: to_uri,
    ValueKind.RESOURCE: to_resource,
}


def convert_value(spec: ValueSpec, raw: str, lookup: ResourceLookup) -> PropertyValue | None:
    return CONVERTERS[spec.kind](spec, raw, lookup)


FALSE_VALUES: Final = frozenset({"false", "no", "off", "private"})


def coerce_bool(raw: str) -> bool:
    """``false``/``no``/``off``/``private`` are false, any other non-empty value true."""

    value = raw.strip()
    return bool(value) and value.lower() not in FALSE_VALUES
