from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from bulkimport.adapters.sources import MemoryEntrySource, RowEntry
from bulkimport.domain.identifiers import IdentifierResolver
from bulkimport.domain.import_pipeline import ResourceBuilder, RunConfig, compile_mapping
from bulkimport.domain.model import (
    LiteralValue,
    MediaDraft,
    ResourceType,
    ResourceValue,
    UriValue,
)
from tests.helpers.fakes import FakeIdentifierStore, FakeLookup

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkimport.domain.identifiers import IdentifierName

IDENTIFIER = 10


def _builder(
    mapping: dict[str, list[str]],
    *,
    store: FakeIdentifierStore | None = None,
    resource_type: ResourceType = ResourceType.ITEMS,
    identifier_names: Sequence[IdentifierName] = ("o:id", IDENTIFIER),
    separator: str = ";",
    **config: object,
) -> ResourceBuilder:
    lookup = FakeLookup()
    run_config = RunConfig(resource_type=resource_type, mapping=mapping, caller_id=3, **config)  # type: ignore[arg-type]
    return ResourceBuilder(
        prototype=run_config.prototype(),
        mapping=compile_mapping(mapping, lookup),
        resolver=IdentifierResolver(store or FakeIdentifierStore(), lookup),
        lookup=lookup,
        identifier_names=identifier_names,
        separator=separator,
    )


def test_values_are_split_trimmed_and_kept_in_order() -> None:
    builder = _builder({"Subject": ["dcterms:description"]})

    draft = builder.build(RowEntry({"Subject": "a;b; b;;"}))

    assert draft is not None
    assert [value.value for value in draft.values if isinstance(value, LiteralValue)] == [
        "a",
        "b",
        "b",
    ]


def test_no_separator_keeps_the_whole_cell() -> None:
    builder = _builder({"Title": ["dcterms:title"]}, separator="")

    draft = builder.build(RowEntry({"Title": " a;b "}))

    assert draft is not None
    assert draft.values == [LiteralValue(1, "literal", "a;b")]


def test_padded_header_matches_a_padded_mapping_key() -> None:
    builder = _builder({"dcterms:title \u00a0": ["dcterms:title"]}, separator="")
    source = MemoryEntrySource(rows=[{" dcterms:title ": "Hello"}])

    drafts = [builder.build(entry) for entry in source]

    assert drafts[0] is not None
    assert drafts[0].values == [LiteralValue(1, "literal", "Hello")]


def test_empty_entry_is_skipped() -> None:
    builder = _builder({"Title": ["dcterms:title"]})

    assert builder.build(RowEntry({"Title": "  ", "Other": ""})) is None


def test_drafts_start_from_the_run_prototype_and_are_independent() -> None:
    builder = _builder({"Title": ["dcterms:title"]}, template_id=2, class_id=31, is_public=False)

    first = builder.build(RowEntry({"Title": "One"}))
    second = builder.build(RowEntry({"Title": "Two"}))

    assert first is not None
    assert second is not None
    assert (second.owner_id, second.template_id, second.class_id) == (3, 2, 31)
    assert second.is_public is False
    assert [value.value for value in second.values if isinstance(value, LiteralValue)] == ["Two"]
    assert len(first.values) == 1


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("private", False), ("No", False), ("off", False), ("yes", True), ("0", True)],
)
def test_visibility_coercion(raw: str, expected: bool) -> None:  # noqa: FBT001
    builder = _builder({"Public": ["o:is_public"]})

    draft = builder.build(RowEntry({"Public": raw}))

    assert draft is not None
    assert draft.is_public is expected


def test_internal_id_is_resolved() -> None:
    store = FakeIdentifierStore()
    store.add_resource(12, ResourceType.ITEMS)
    builder = _builder({"ID": ["o:id"]}, store=store)

    draft = builder.build(RowEntry({"ID": "12"}))

    assert draft is not None
    assert draft.resource_id == 12
    assert draft.id_checked is True
    assert draft.has_error is False


def test_unknown_internal_id_flags_the_entry(caplog: pytest.LogCaptureFixture) -> None:
    builder = _builder({"ID": ["o:id"]})

    with caplog.at_level(logging.ERROR):
        draft = builder.build(RowEntry({"ID": "99"}), index=4)

    assert draft is not None
    assert draft.has_error is True
    assert draft.resource_id is None
    assert "internal id #99 cannot be found" in caplog.text
    assert "Index #4" in caplog.text


def test_zero_internal_id_is_ignored() -> None:
    builder = _builder({"ID": ["o:id"], "Title": ["dcterms:title"]})

    draft = builder.build(RowEntry({"ID": "0", "Title": "x"}))

    assert draft is not None
    assert draft.has_error is False
    assert draft.resource_id is None


def test_generic_lookups_use_the_last_value(caplog: pytest.LogCaptureFixture) -> None:
    builder = _builder(
        {
            "Template": ["o:resource_template"],
            "Class": ["o:resource_class"],
            "Owner": ["o:owner"],
        },
        template_id=5,
    )

    draft = builder.build(
        RowEntry({"Template": "Unknown;Book", "Class": "dctype:Text", "Owner": "editor@example.org"})
    )
    assert draft is not None
    assert (draft.template_id, draft.class_id, draft.owner_id) == (2, 31, 7)

    with caplog.at_level(logging.WARNING):
        kept = builder.build(RowEntry({"Template": "Unknown"}))
    assert kept is not None
    assert kept.template_id == 5
    assert 'resource template "Unknown" cannot be found' in caplog.text


def test_resource_values_resolve_through_identifier_names(
    caplog: pytest.LogCaptureFixture,
) -> None:
    store = FakeIdentifierStore()
    store.add_resource(5, ResourceType.ITEMS, values={IDENTIFIER: "REL-1"})
    store.add_resource(6, ResourceType.ITEM_SETS, values={IDENTIFIER: "REL-2"})
    builder = _builder({"Related ^^resource:item": ["dcterms:relation"]}, store=store)

    with caplog.at_level(logging.WARNING):
        draft = builder.build(RowEntry({"Related ^^resource:item": "REL-1;5;REL-2"}))

    assert draft is not None
    assert draft.values == [
        ResourceValue(13, "resource:item", 5),
        ResourceValue(13, "resource:item", 5),
    ]
    assert '"REL-2" of dcterms:relation does not match any resource' in caplog.text


def test_uri_values() -> None:
    builder = _builder({"Link ^^uri": ["dcterms:relation"]})

    draft = builder.build(RowEntry({"Link ^^uri": "https://example.org/a"}))

    assert draft is not None
    assert draft.values == [UriValue(13, "uri", "https://example.org/a")]


def test_item_sets_are_resolved_with_the_nested_identifier_name() -> None:
    store = FakeIdentifierStore()
    store.add_resource(20, ResourceType.ITEM_SETS, values={IDENTIFIER: "col-a"})
    store.add_resource(21, ResourceType.ITEMS, values={IDENTIFIER: "col-b"})
    builder = _builder({"Sets": ["o:item_set {dcterms:identifier}"]}, store=store)

    draft = builder.build(RowEntry({"Sets": "col-a;col-b;COL-A"}))

    assert draft is not None
    assert draft.item_set_ids == [20]


def test_item_sets_by_internal_id() -> None:
    store = FakeIdentifierStore()
    store.add_resource(20, ResourceType.ITEM_SETS)
    builder = _builder({"Sets": ["o:item_set {o:id}"]}, store=store)

    draft = builder.build(RowEntry({"Sets": "20"}))

    assert draft is not None
    assert draft.item_set_ids == [20]


def test_url_attaches_media_and_nested_media_values() -> None:
    builder = _builder({"Image": ["url"], "Caption": ["o:media {dcterms:title}"]})

    draft = builder.build(
        RowEntry({"Image": "https://example.org/1.jpg;https://example.org/2.jpg", "Caption": "Two"})
    )

    assert draft is not None
    assert draft.media == [
        MediaDraft(ingester="url", source="https://example.org/1.jpg"),
        MediaDraft(
            ingester="url",
            source="https://example.org/2.jpg",
            values=[LiteralValue(1, "literal", "Two")],
        ),
    ]


def test_media_entries_resolve_their_parent_item() -> None:
    store = FakeIdentifierStore()
    store.add_resource(8, ResourceType.ITEMS, values={IDENTIFIER: "it-8"})
    builder = _builder(
        {"Item": ["o:item"], "File": ["file"]},
        store=store,
        resource_type=ResourceType.MEDIA,
    )

    draft = builder.build(RowEntry({"Item": "it-8", "File": "scan.tif"}))
    orphan = builder.build(RowEntry({"Item": "nope", "File": "scan.tif"}))

    assert draft is not None
    assert (draft.item_id, draft.ingester, draft.source) == (8, "file", "scan.tif")
    assert orphan is not None
    assert orphan.has_error is True


def test_item_set_open_flag() -> None:
    builder = _builder({"Open": ["o:is_open"]}, resource_type=ResourceType.ITEM_SETS)

    opened = builder.build(RowEntry({"Open": "yes"}))
    closed = builder.build(RowEntry({"Open": "no"}))

    assert opened is not None
    assert closed is not None
    assert (opened.is_open, closed.is_open) == (True, False)


def test_fallback_keeps_the_last_value() -> None:
    builder = _builder({"Notes": ["notes"], "Open": ["o:is_open"]})

    draft = builder.build(RowEntry({"Notes": "x;y", "Open": "1"}))

    assert draft is not None
    assert draft.unmapped == {"notes": "y", "o:is_open": "1"}
