"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceType(StrEnum):
    ITEMS = "items"
    ITEM_SETS = "item_sets"
    MEDIA = "media"

    @property
    def label(self) -> str:
        return _RESOURCE_LABELS[self]


_RESOURCE_LABELS = {
    ResourceType.ITEMS: "item",
    ResourceType.ITEM_SETS: "item set",
    ResourceType.MEDIA: "media",
}


class IdentifierKind(StrEnum):
    INTERNAL_ID = "internal-id"
    PROPERTY = "property"
    MEDIA_SOURCE = "media-source"


class DuplicatePolicy(StrEnum):
    """What to do with an entry whose identifiers match an existing resource."""

    ALLOW = "allow"
    REJECT = "reject"


class ValueKind(StrEnum):
    """Shape of a property value, derived from its datatype."""

    LITERAL = "literal"
    URI = "uri"
    RESOURCE = "resource"


class Attribute(StrEnum):
    """Non-property targets a mapping may point to."""

    # Shared by every resource type.
    INTERNAL_ID = "o:id"
    TEMPLATE = "o:resource_template"
    CLASS = "o:resource_class"
    OWNER = "o:owner"
    VISIBILITY = "o:is_public"

    # Resource type specific.
    ITEM_SET = "o:item_set"
    ITEM = "o:item"
    MEDIA = "o:media"
    IS_OPEN = "o:is_open"
    URL = "url"
    FILE = "file"

    @property
    def is_generic(self) -> bool:
        return self in GENERIC_ATTRIBUTES


GENERIC_ATTRIBUTES = frozenset(
    {
        Attribute.INTERNAL_ID,
        Attribute.TEMPLATE,
        Attribute.CLASS,
        Attribute.OWNER,
        Attribute.VISIBILITY,
    }
)

ATTRIBUTE_ALIASES: dict[str, Attribute] = {
    **{attribute.value: attribute for attribute in Attribute},
    "internal_id": Attribute.INTERNAL_ID,
    "internal-id": Attribute.INTERNAL_ID,
    "template": Attribute.TEMPLATE,
    "class": Attribute.CLASS,
    "owner": Attribute.OWNER,
    "email": Attribute.OWNER,
    "o:email": Attribute.OWNER,
    "visibility": Attribute.VISIBILITY,
}
