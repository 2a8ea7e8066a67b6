"""Turn one source entry into a resource draft.

Each compiled mapping entry fills the draft in one of four ways:

- property targets append one typed value per split cell value
- generic attributes (internal id, template, class, owner, visibility) take
  the last value of the list
- resource type specific attributes (item sets of an item, media of an item,
  the parent item of a media...) are handled per resource type
- anything else keeps the last value verbatim in ``draft.unmapped``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bulkimport.common.reporting import RunReporter
from bulkimport.domain.identifiers import MEDIA_INGESTERS
from bulkimport.domain.model import (
    Attribute,
    AttributeEntry,
    MediaDraft,
    PropertyEntry,
    ResourceType,
)
from bulkimport.domain.text import split_values

from .values import coerce_bool, convert_value, to_literal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkimport.domain.identifiers import IdentifierName, IdentifierResolver
    from bulkimport.domain.model import CompiledMapping, MappingEntry, ResourceDraft, ValueSpec
    from bulkimport.domain.ports import Entry, NameLookup


class ResourceBuilder:
    """Build drafts from entries using a compiled mapping."""

    def __init__(
        self,
        *,
        prototype: ResourceDraft,
        mapping: CompiledMapping,
        resolver: IdentifierResolver,
        lookup: NameLookup,
        identifier_names: Sequence[IdentifierName],
        separator: str = "",
        reporter: RunReporter | None = None,
    ) -> None:
        self.prototype = prototype
        self.mapping = mapping
        self.resolver = resolver
        self.lookup = lookup
        self.identifier_names = tuple(identifier_names)
        self.separator = separator
        self.reporter = reporter or RunReporter.for_module(__name__)

    def build(self, entry: Entry, *, index: int | None = None) -> ResourceDraft | None:
        """Return a fresh draft for ``entry``, or ``None`` when the entry has no data."""

        if entry.is_empty():
            return None

        draft = self.prototype.clone()
        for field_mapping in self.mapping:
            raw = entry.get(field_mapping.source)
            if raw is None:
                continue
            values = split_values(raw, self.separator)
            if not values:
                continue
            for mapping_entry in field_mapping.entries:
                self._fill(draft, mapping_entry, values, index)
        return draft

    def resolve_reference(
        self,
        identifier: str,
        resource_type: ResourceType | None,
        names: Sequence[IdentifierName] | None = None,
    ) -> int | None:
        """Return the first resource id any identifier name finds for ``identifier``."""

        for name in names or self.identifier_names:
            resource_id = self.resolver.find_one(identifier, name, resource_type)
            if resource_id is not None:
                return resource_id
        return None

    def _fill(
        self,
        draft: ResourceDraft,
        entry: MappingEntry,
        values: list[str],
        index: int | None,
    ) -> None:
        if isinstance(entry, PropertyEntry):
            self._fill_property(draft, entry.value, values, index)
            return
        if isinstance(entry, AttributeEntry):
            if entry.attribute.is_generic:
                self._fill_generic(draft, entry, values, index)
                return
            if self._fill_specific(draft, entry, values, index):
                return
        draft.unmapped[entry.target] = values[-1]

    def _fill_property(
        self,
        draft: ResourceDraft,
        spec: ValueSpec,
        values: list[str],
        index: int | None,
    ) -> None:
        for raw in values:
            value = convert_value(spec, raw, self.resolve_reference)
            if value is None:
                self.reporter.warn(
                    'Index #{index}: value "{value}" of {term} does not match any resource and '
                    "is skipped.",
                    index=index,
                    value=raw,
                    term=spec.term,
                )
                continue
            draft.add_value(value)

    def _fill_generic(
        self,
        draft: ResourceDraft,
        entry: AttributeEntry,
        values: list[str],
        index: int | None,
    ) -> None:
        value = values[-1]
        attribute = entry.attribute
        if attribute is Attribute.INTERNAL_ID:
            self._fill_internal_id(draft, value, index)
        elif attribute is Attribute.TEMPLATE:
            template_id = self.lookup.find_resource_template_id(value)
            if template_id is None:
                self._warn_unknown(index, "resource template", value)
            else:
                draft.template_id = template_id
        elif attribute is Attribute.CLASS:
            class_id = self.lookup.find_resource_class_id(value)
            if class_id is None:
                self._warn_unknown(index, "resource class", value)
            else:
                draft.class_id = class_id
        elif attribute is Attribute.OWNER:
            owner_id = self.lookup.find_user_id(value)
            if owner_id is None:
                self._warn_unknown(index, "owner", value)
            else:
                draft.owner_id = owner_id
        elif attribute is Attribute.VISIBILITY:
            draft.is_public = coerce_bool(value)

    def _fill_internal_id(self, draft: ResourceDraft, value: str, index: int | None) -> None:
        if not value.isdecimal() or int(value) == 0:
            return
        resource_id = self.resolver.find_one(value, "o:id", draft.resource_type)
        if resource_id is None:
            draft.has_error = True
            self.reporter.error(
                "Index #{index}: internal id #{id} cannot be found. The entry is skipped.",
                index=index,
                id=value,
            )
            return
        draft.resource_id = resource_id
        draft.id_checked = draft.resource_type is not None

    def _fill_specific(
        self,
        draft: ResourceDraft,
        entry: AttributeEntry,
        values: list[str],
        index: int | None,
    ) -> bool:
        if draft.resource_type is ResourceType.ITEMS:
            return self._fill_item(draft, entry, values, index)
        if draft.resource_type is ResourceType.ITEM_SETS:
            if entry.attribute is Attribute.IS_OPEN:
                draft.is_open = coerce_bool(values[-1])
                return True
            return False
        if draft.resource_type is ResourceType.MEDIA:
            return self._fill_media(draft, entry, values, index)
        return False

    def _fill_item(
        self,
        draft: ResourceDraft,
        entry: AttributeEntry,
        values: list[str],
        index: int | None,
    ) -> bool:
        attribute = entry.attribute
        if attribute is Attribute.ITEM_SET:
            names = self._target_names(entry)
            for raw in values:
                item_set_id = self.resolve_reference(raw, ResourceType.ITEM_SETS, names)
                if item_set_id is None:
                    self._warn_unknown(index, "item set", raw)
                elif item_set_id not in draft.item_set_ids:
                    draft.item_set_ids.append(item_set_id)
            return True

        if attribute in (Attribute.URL, Attribute.FILE):
            draft.media.extend(MediaDraft(ingester=attribute.value, source=raw) for raw in values)
            return True

        if attribute is Attribute.MEDIA:
            if entry.target_data in MEDIA_INGESTERS:
                draft.media.extend(
                    MediaDraft(ingester=entry.target_data, source=raw) for raw in values
                )
                return True
            if entry.target_data_value is None:
                return False
            if not draft.media:
                draft.media.append(MediaDraft())
            media = draft.media[-1]
            media.values.extend(to_literal(entry.target_data_value, raw) for raw in values)
            return True

        return False

    def _fill_media(
        self,
        draft: ResourceDraft,
        entry: AttributeEntry,
        values: list[str],
        index: int | None,
    ) -> bool:
        attribute = entry.attribute
        if attribute is Attribute.ITEM:
            value = values[-1]
            item_id = self.resolve_reference(value, ResourceType.ITEMS, self._target_names(entry))
            if item_id is None:
                draft.has_error = True
                self.reporter.error(
                    'Index #{index}: parent item "{value}" cannot be found. The entry is skipped.',
                    index=index,
                    value=value,
                )
            else:
                draft.item_id = item_id
            return True

        if attribute in (Attribute.URL, Attribute.FILE):
            draft.ingester = attribute.value
            draft.source = values[-1]
            return True

        return False

    def _target_names(self, entry: AttributeEntry) -> tuple[IdentifierName, ...]:
        if entry.target_data_value is not None:
            return (entry.target_data_value.property_id,)
        if entry.target_data:
            return (entry.target_data,)
        return self.identifier_names

    def _warn_unknown(self, index: int | None, kind: str, value: str) -> None:
        self.reporter.warn(
            'Index #{index}: {kind} "{value}" cannot be found and is ignored.',
            index=index,
            kind=kind,
            value=value,
        )
