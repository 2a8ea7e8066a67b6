"""Resource drafts: payloads under construction for a single entry."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import ResourceType
    from .values import PropertyValue


@dataclass(slots=True)
class MediaDraft:
    """Media attached to an item draft, created together with it."""

    ingester: str | None = None
    source: str | None = None
    values: list[PropertyValue] = field(default_factory=list["PropertyValue"])


@dataclass(slots=True)
class ResourceDraft:
    """Typed payload for one resource to create.

    ``resource_id`` is only ever a *match* against an existing resource: drafts
    are always created as new resources.
    """

    resource_type: ResourceType | None
    owner_id: int | None = None
    is_public: bool = True
    template_id: int | None = None
    class_id: int | None = None

    resource_id: int | None = None
    id_checked: bool = False
    has_error: bool = False
    is_duplicate: bool = False

    values: list[PropertyValue] = field(default_factory=list["PropertyValue"])

    # Items
    item_set_ids: list[int] = field(default_factory=list[int])
    media: list[MediaDraft] = field(default_factory=list[MediaDraft])
    # Item sets
    is_open: bool | None = None
    # Media
    item_id: int | None = None
    ingester: str | None = None
    source: str | None = None

    unmapped: dict[str, str] = field(default_factory=dict[str, str])

    def clone(self) -> ResourceDraft:
        """Return an independent copy (lists and nested media are copied)."""

        return replace(
            self,
            values=list(self.values),
            item_set_ids=list(self.item_set_ids),
            media=[replace(media, values=list(media.values)) for media in self.media],
            unmapped=dict(self.unmapped),
        )

    def add_value(self, value: PropertyValue) -> None:
        self.values.append(value)

    def values_for(self, property_id: int) -> list[PropertyValue]:
        return [value for value in self.values if value.property_id == property_id]


@dataclass(frozen=True, slots=True)
class CreatedResource:
    """A resource the write sink reported as created."""

    resource_type: ResourceType
    id: int
