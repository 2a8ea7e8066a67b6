"""Identifier names: how a human-facing name maps to an identifier kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from bulkimport.domain.model import ResourceType

INTERNAL_ID_NAMES: Final = frozenset({"o:id", "internal_id", "internal-id"})
MEDIA_INGESTERS: Final = frozenset({"url", "file"})
# Media created from inline html has no source to match against.
UNSUPPORTED_INGESTERS: Final = frozenset({"html"})

RESOURCE_TYPE_ALIASES: Final[dict[str, ResourceType | None]] = {
    "items": ResourceType.ITEMS,
    "item_sets": ResourceType.ITEM_SETS,
    "media": ResourceType.MEDIA,
    "resources": None,
    "o:item": ResourceType.ITEMS,
    "o:item_set": ResourceType.ITEM_SETS,
    "o:media": ResourceType.MEDIA,
}


@dataclass(frozen=True, slots=True)
class MediaSourceName:
    """Identify media by their source, for one ingester, optionally within one item."""

    ingester: str
    item_id: int | None = None


type IdentifierName = str | int | MediaSourceName


class UnsupportedIdentifierQuery(ValueError):
    """Raised internally when a name/resource type combination cannot be resolved."""


def parse_resource_type(value: ResourceType | str | None) -> ResourceType | None:
    """Normalize a resource type alias; ``None`` means "any resource type"."""

    if value is None or value == "":
        return None
    if isinstance(value, ResourceType):
        return value
    try:
        return RESOURCE_TYPE_ALIASES[value]
    except KeyError as exc:
        raise UnsupportedIdentifierQuery(f"Unsupported resource type: {value!r}") from exc


def is_internal_id_name(name: IdentifierName) -> bool:
    return isinstance(name, str) and name in INTERNAL_ID_NAMES


def numeric_name(name: IdentifierName) -> int | None:
    """Return the property id a numeric identifier name stands for."""

    if isinstance(name, bool):
        return None
    if isinstance(name, int):
        return name if name > 0 else None
    if isinstance(name, str) and name.strip().isdecimal():
        value = int(name.strip())
        return value if value > 0 else None
    return None
