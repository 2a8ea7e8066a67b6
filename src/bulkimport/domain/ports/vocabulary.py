"""Ports for the property/vocabulary registry and related name lookups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class AutoMappedField:
    """Metadata detected from a raw source field name."""

    field: str
    datatype: str | None = None
    language: str | None = None


@runtime_checkable
class NameLookup(Protocol):
    """Name -> id lookups needed to compile mappings and fill drafts."""

    def find_property_id(self, term: str | int) -> int | None: ...

    def get_property_term(self, property_id: int) -> str | None: ...

    def get_data_type(self, hint: str | None) -> str | None: ...

    def auto_detect(self, field_names: Sequence[str]) -> list[AutoMappedField]:
        """Return one result per input name, positionally aligned."""
        ...

    def find_resource_template_id(self, value: str) -> int | None: ...

    def find_resource_class_id(self, value: str) -> int | None: ...

    def find_user_id(self, value: str) -> int | None: ...
