from __future__ import annotations

import copy

from bulkimport.domain.import_pipeline import compile_mapping, split_target
from bulkimport.domain.model import (
    Attribute,
    AttributeEntry,
    FallbackEntry,
    PropertyEntry,
    ValueKind,
    ValueSpec,
)
from tests.helpers.fakes import FakeLookup


def test_compile_mapping_tags_each_target(lookup: FakeLookup) -> None:
    compiled = compile_mapping(
        {
            "Title": ["dcterms:title"],
            "Owner": ["o:owner"],
            "Notes": ["notes"],
            "Ignored": [],
            "Blank": ["  "],
        },
        lookup,
    )

    assert [field_mapping.source for field_mapping in compiled] == ["Title", "Owner", "Notes"]
    title = compiled[0].entries[0]
    assert isinstance(title, PropertyEntry)
    assert title.field == "dcterms:title"
    assert title.value == ValueSpec(property_id=1, term="dcterms:title")
    owner = compiled[1].entries[0]
    assert isinstance(owner, AttributeEntry)
    assert owner.attribute is Attribute.OWNER
    notes = compiled[2].entries[0]
    assert isinstance(notes, FallbackEntry)
    assert notes.target == "notes"


def test_source_names_are_trimmed_like_entry_fields(lookup: FakeLookup) -> None:
    compiled = compile_mapping({" Title\t": ["dcterms:title"], "  ": ["dcterms:subject"]}, lookup)

    assert [field_mapping.source for field_mapping in compiled] == ["Title"]


def test_one_field_may_have_several_targets(lookup: FakeLookup) -> None:
    compiled = compile_mapping({"Code": ["dcterms:identifier", "bibo:isbn"]}, lookup)

    entries = compiled[0].entries
    assert [entry.target for entry in entries] == ["dcterms:identifier", "bibo:isbn"]


def test_nested_targets_keep_inner_name_and_property(lookup: FakeLookup) -> None:
    compiled = compile_mapping(
        {
            "Collection": ["o:item_set {dcterms:identifier}"],
            "Collection id": ["o:item_set {o:id}"],
            "Caption": ["o:media {dcterms:title}"],
        },
        lookup,
    )

    by_identifier = compiled[0].entries[0]
    assert isinstance(by_identifier, AttributeEntry)
    assert by_identifier.attribute is Attribute.ITEM_SET
    assert by_identifier.target_data == "dcterms:identifier"
    assert by_identifier.target_data_value == ValueSpec(property_id=10, term="dcterms:identifier")

    by_id = compiled[1].entries[0]
    assert isinstance(by_id, AttributeEntry)
    assert by_id.target_data == "o:id"
    assert by_id.target_data_value is None

    caption = compiled[2].entries[0]
    assert isinstance(caption, AttributeEntry)
    assert caption.attribute is Attribute.MEDIA
    assert caption.target_data_value is not None
    assert caption.target_data_value.term == "dcterms:title"


def test_header_language_and_datatype_are_detected(lookup: FakeLookup) -> None:
    compiled = compile_mapping({"Title @fr ^^uri": ["dcterms:title"]}, lookup)

    entry = compiled[0].entries[0]
    assert isinstance(entry, PropertyEntry)
    assert entry.field == "dcterms:title"
    assert entry.value.language == "fr"
    assert entry.value.datatype == "uri"
    assert entry.value.kind is ValueKind.URI


def test_unknown_datatype_hint_falls_back_to_literal(lookup: FakeLookup) -> None:
    compiled = compile_mapping({"Title ^^bogus": ["dcterms:title"]}, lookup)

    entry = compiled[0].entries[0]
    assert isinstance(entry, PropertyEntry)
    assert entry.value.datatype == "literal"


def test_attribute_aliases(lookup: FakeLookup) -> None:
    compiled = compile_mapping(
        {"a": ["template"], "b": ["email"], "c": ["internal-id"], "d": ["visibility"]},
        lookup,
    )

    attributes = [
        entry.attribute
        for field_mapping in compiled
        for entry in field_mapping.entries
        if isinstance(entry, AttributeEntry)
    ]
    assert attributes == [
        Attribute.TEMPLATE,
        Attribute.OWNER,
        Attribute.INTERNAL_ID,
        Attribute.VISIBILITY,
    ]


def test_compilation_is_idempotent_and_leaves_input_untouched(lookup: FakeLookup) -> None:
    raw = {
        "Title": ["dcterms:title"],
        "Collection": ["o:item_set {dcterms:identifier}"],
        "Other": ["whatever"],
    }
    snapshot = copy.deepcopy(raw)

    assert compile_mapping(raw, lookup) == compile_mapping(raw, lookup)
    assert raw == snapshot


def test_split_target() -> None:
    assert split_target("o:media {dcterms:title}") == ("o:media", "dcterms:title")
    assert split_target("  dcterms:title ") == ("dcterms:title", None)
    assert split_target("{dcterms:title}") == ("{dcterms:title}", None)
    assert split_target("o:item {}") == ("o:item", None)
