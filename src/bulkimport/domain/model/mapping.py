"""Compiled mapping entries (tagged variants built once per run)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import Attribute
    from .values import ValueSpec


@dataclass(frozen=True, slots=True)
class PropertyEntry:
    """Target resolved to a repository property."""

    field: str
    target: str
    value: ValueSpec


@dataclass(frozen=True, slots=True)
class AttributeEntry:
    """Target naming a known resource attribute (``o:owner``, ``o:item_set``...)."""

    field: str
    target: str
    attribute: Attribute
    target_data: str | None = None
    target_data_value: ValueSpec | None = None


@dataclass(frozen=True, slots=True)
class FallbackEntry:
    """Anything else: the last value of the list is kept verbatim."""

    field: str
    target: str
    datatype: str | None = None
    language: str | None = None
    target_data: str | None = None
    target_data_value: ValueSpec | None = None


type MappingEntry = PropertyEntry | AttributeEntry | FallbackEntry


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """All compiled targets of one source field."""

    source: str
    entries: tuple[MappingEntry, ...]


type CompiledMapping = tuple[FieldMapping, ...]
