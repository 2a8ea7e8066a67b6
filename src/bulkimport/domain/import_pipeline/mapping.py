"""Compile a raw field mapping into tagged mapping entries.

The raw mapping is ``source field -> [target, ...]``. Targets may be property
terms (``dcterms:title``), attribute names (``o:owner``, ``o:item_set``...) or a
nested form ``outer {inner}`` which points ``inner`` at a related resource
(``o:media {dcterms:title}``) or names the identifier used to find it
(``o:item_set {dcterms:identifier}``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bulkimport.domain.model import (
    ATTRIBUTE_ALIASES,
    DEFAULT_DATATYPE,
    AttributeEntry,
    FallbackEntry,
    FieldMapping,
    PropertyEntry,
    ValueSpec,
)
from bulkimport.domain.ports import AutoMappedField
from bulkimport.domain.text import trim_unicode

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from bulkimport.domain.model import CompiledMapping, MappingEntry
    from bulkimport.domain.ports import NameLookup


def compile_mapping(
    raw_mapping: Mapping[str, Sequence[str]],
    lookup: NameLookup,
) -> CompiledMapping:
    """Return compiled field mappings in source field order.

    Source names are trimmed like entry field names, so a padded header still
    matches its cells. Source fields without any non-blank target are dropped.
    The input is not modified, so compiling the same mapping twice gives equal
    results.
    """

    raw_fields = [field for field in raw_mapping if trim_unicode(field)]
    fields = [trim_unicode(field) for field in raw_fields]
    detected = lookup.auto_detect(fields) if fields else []

    compiled: list[FieldMapping] = []
    for index, (raw_field, source) in enumerate(zip(raw_fields, fields, strict=True)):
        targets = [target for target in raw_mapping[raw_field] or () if target and target.strip()]
        if not targets:
            continue
        metadata = detected[index] if index < len(detected) else AutoMappedField(field=source)
        entries = tuple(compile_target(target, metadata, lookup) for target in targets)
        compiled.append(FieldMapping(source=source, entries=entries))
    return tuple(compiled)


def compile_target(target: str, metadata: AutoMappedField, lookup: NameLookup) -> MappingEntry:
    outer, inner = split_target(target)

    target_data_value: ValueSpec | None = None
    if inner:
        inner_id = lookup.find_property_id(inner)
        if inner_id is not None:
            target_data_value = ValueSpec(
                property_id=inner_id,
                term=lookup.get_property_term(inner_id) or inner,
            )

    property_id = lookup.find_property_id(outer)
    if property_id is not None:
        return PropertyEntry(
            field=metadata.field,
            target=lookup.get_property_term(property_id) or outer,
            value=ValueSpec(
                property_id=property_id,
                term=lookup.get_property_term(property_id) or outer,
                datatype=lookup.get_data_type(metadata.datatype) or DEFAULT_DATATYPE,
                language=metadata.language,
                is_public=True,
            ),
        )

    attribute = ATTRIBUTE_ALIASES.get(outer)
    if attribute is not None:
        return AttributeEntry(
            field=metadata.field,
            target=outer,
            attribute=attribute,
            target_data=inner,
            target_data_value=target_data_value,
        )

    return FallbackEntry(
        field=metadata.field,
        target=outer,
        datatype=metadata.datatype,
        language=metadata.language,
        target_data=inner,
        target_data_value=target_data_value,
    )


def split_target(target: str) -> tuple[str, str | None]:
    """Split ``"outer {inner}"`` into ``("outer", "inner")``."""

    position = target.find("{")
    if position <= 0:
        return target.strip(), None
    inner = target[position + 1 :].strip("{} ")
    return target[:position].strip(), inner or None
