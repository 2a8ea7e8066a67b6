"""Typed property values carried by a resource draft."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ValueKind

DEFAULT_DATATYPE = "literal"

_RESOURCE_DATATYPES = frozenset({"resource", "resource:item", "resource:itemset", "resource:media"})

DATATYPE_ALIASES = {
    "text": "literal",
    "item": "resource:item",
    "items": "resource:item",
    "itemset": "resource:itemset",
    "item_set": "resource:itemset",
    "item_sets": "resource:itemset",
    "media": "resource:media",
}
KNOWN_DATATYPES = frozenset({DEFAULT_DATATYPE, "uri", *_RESOURCE_DATATYPES})


def normalize_datatype(hint: str | None) -> str | None:
    """Return the canonical datatype for ``hint``, or ``None`` when it is unknown.

    Prefixed datatypes (``valuesuggest:...``, ``numeric:...``) are kept as given.
    """

    if not hint or not hint.strip():
        return None
    value = hint.strip()
    value = DATATYPE_ALIASES.get(value.lower(), value)
    if value in KNOWN_DATATYPES or ":" in value:
        return value
    return None


def value_kind_for(datatype: str) -> ValueKind:
    """Return the value shape used for ``datatype``.

    Unknown datatypes (custom vocabularies, numeric types...) are literal.
    """

    if datatype in _RESOURCE_DATATYPES:
        return ValueKind.RESOURCE
    if datatype == "uri" or datatype.startswith("valuesuggest:"):
        return ValueKind.URI
    return ValueKind.LITERAL


@dataclass(frozen=True, slots=True)
class ValueSpec:
    """Compiled description of the values written under one property."""

    property_id: int
    term: str
    datatype: str = DEFAULT_DATATYPE
    language: str | None = None
    is_public: bool = True

    @property
    def kind(self) -> ValueKind:
        return value_kind_for(self.datatype)


@dataclass(frozen=True, slots=True)
class LiteralValue:
    property_id: int
    datatype: str
    value: str
    language: str | None = None
    is_public: bool = True


@dataclass(frozen=True, slots=True)
class UriValue:
    property_id: int
    datatype: str
    uri: str
    label: str | None = None
    is_public: bool = True


@dataclass(frozen=True, slots=True)
class ResourceValue:
    property_id: int
    datatype: str
    resource_id: int
    is_public: bool = True


type PropertyValue = LiteralValue | UriValue | ResourceValue
