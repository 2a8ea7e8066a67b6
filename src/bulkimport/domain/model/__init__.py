"""Domain model for resource drafts and compiled mappings."""

from __future__ import annotations

from .draft import CreatedResource, MediaDraft, ResourceDraft
from .enums import (
    ATTRIBUTE_ALIASES,
    GENERIC_ATTRIBUTES,
    Attribute,
    DuplicatePolicy,
    IdentifierKind,
    ResourceType,
    ValueKind,
)
from .mapping import (
    AttributeEntry,
    CompiledMapping,
    FallbackEntry,
    FieldMapping,
    MappingEntry,
    PropertyEntry,
)
from .values import (
    DATATYPE_ALIASES,
    DEFAULT_DATATYPE,
    KNOWN_DATATYPES,
    LiteralValue,
    PropertyValue,
    ResourceValue,
    UriValue,
    ValueSpec,
    normalize_datatype,
    value_kind_for,
)

__all__ = [
    "ATTRIBUTE_ALIASES",
    "DATATYPE_ALIASES",
    "DEFAULT_DATATYPE",
    "GENERIC_ATTRIBUTES",
    "KNOWN_DATATYPES",
    "Attribute",
    "AttributeEntry",
    "CompiledMapping",
    "CreatedResource",
    "DuplicatePolicy",
    "FallbackEntry",
    "FieldMapping",
    "IdentifierKind",
    "LiteralValue",
    "MappingEntry",
    "MediaDraft",
    "PropertyEntry",
    "PropertyValue",
    "ResourceDraft",
    "ResourceType",
    "ResourceValue",
    "UriValue",
    "ValueKind",
    "ValueSpec",
    "normalize_datatype",
    "value_kind_for",
]
