from __future__ import annotations

import logging

import pytest

from bulkimport.adapters.sources import MemoryEntrySource
from bulkimport.domain.identifiers import IdentifierResolver
from bulkimport.domain.import_pipeline import (
    BatchImportPipeline,
    DraftChecker,
    PipelineState,
    ResourceBuilder,
    RunConfig,
    compile_mapping,
    run_import_pipeline,
)
from bulkimport.domain.model import DuplicatePolicy, LiteralValue, ResourceType
from tests.helpers.fakes import (
    FakeIdentifierStore,
    FakeLookup,
    RecordingSink,
    make_unit_of_work,
)

MAPPING = {"Title": ["dcterms:title"], "Identifier": ["dcterms:identifier"]}


def _rows(count: int) -> list[dict[str, str]]:
    return [{"Title": f"Title {n}", "Identifier": f"id-{n}"} for n in range(1, count + 1)]


def _config(**overrides: object) -> RunConfig:
    options: dict[str, object] = {
        "resource_type": ResourceType.ITEMS,
        "mapping": MAPPING,
        "identifier_names": ("dcterms:identifier",),
        "caller_id": 1,
    }
    options.update(overrides)
    return RunConfig(**options)  # type: ignore[arg-type]


def test_entries_are_written_in_batches() -> None:
    sink = RecordingSink()
    uow = make_unit_of_work(sink=sink)

    counters = run_import_pipeline(
        source=MemoryEntrySource(_rows(7)),
        config=_config(entries_by_batch=3),
        uow=uow,
    )

    assert sink.batch_sizes == [3, 3, 1]
    assert [kind for kind, _ in sink.calls] == ["many", "many", "one"]
    assert uow.commits == 3
    assert counters.as_dict() == {"seen": 7, "skipped": 0, "processed": 7, "errors": 0}


def test_default_batch_size() -> None:
    sink = RecordingSink()

    run_import_pipeline(
        source=MemoryEntrySource(_rows(45)),
        config=_config(),
        uow=make_unit_of_work(sink=sink),
    )

    assert sink.batch_sizes == [20, 20, 5]


def test_drafts_carry_mapped_values_in_order() -> None:
    sink = RecordingSink()

    run_import_pipeline(
        source=MemoryEntrySource(_rows(2)),
        config=_config(),
        uow=make_unit_of_work(sink=sink),
    )

    (_, drafts), = sink.calls
    assert drafts[1].values == [
        LiteralValue(1, "literal", "Title 2"),
        LiteralValue(10, "literal", "id-2"),
    ]
    assert drafts[1].owner_id == 1


def test_empty_entries_are_skipped_and_do_not_fill_batches() -> None:
    sink = RecordingSink()
    rows = [*_rows(2), {"Title": "", "Identifier": " "}, *_rows(1)]

    counters = run_import_pipeline(
        source=MemoryEntrySource(rows),
        config=_config(entries_by_batch=2),
        uow=make_unit_of_work(sink=sink),
    )

    assert counters.skipped == 1
    assert counters.processed == 3
    assert sink.batch_sizes == [2, 1]


def test_rejected_duplicates_are_counted_as_errors() -> None:
    store = FakeIdentifierStore()
    store.add_resource(9, ResourceType.ITEMS, values={10: "id-2"})
    sink = RecordingSink()

    counters = run_import_pipeline(
        source=MemoryEntrySource(_rows(3)),
        config=_config(),
        uow=make_unit_of_work(store=store, sink=sink),
    )

    assert counters.errors == 1
    assert counters.processed == 2
    assert sink.batch_sizes == [2]


def test_allowed_duplicates_are_created() -> None:
    store = FakeIdentifierStore()
    store.add_resource(9, ResourceType.ITEMS, values={10: "id-2"})
    sink = RecordingSink()

    counters = run_import_pipeline(
        source=MemoryEntrySource(_rows(3)),
        config=_config(duplicate_policy=DuplicatePolicy.ALLOW),
        uow=make_unit_of_work(store=store, sink=sink),
    )

    assert counters.errors == 0
    assert sink.batch_sizes == [3]
    assert [draft.is_duplicate for draft in sink.calls[0][1]] == [False, True, False]


def test_failed_batch_is_rolled_back_and_counted(caplog: pytest.LogCaptureFixture) -> None:
    sink = RecordingSink(fail_calls={1})
    uow = make_unit_of_work(sink=sink)

    with caplog.at_level(logging.ERROR):
        counters = run_import_pipeline(
            source=MemoryEntrySource(_rows(5)),
            config=_config(entries_by_batch=3),
            uow=uow,
        )

    assert counters.errors == 3
    assert counters.processed == 5
    assert (uow.commits, uow.rollbacks) == (1, 1)
    assert "Core error during creation of 3 item: store unavailable" in caplog.text


def test_partial_batch_failure_counts_missing_resources() -> None:
    sink = RecordingSink(
        reject=lambda draft: any(
            isinstance(value, LiteralValue) and value.value == "id-2" for value in draft.values
        )
    )

    counters = run_import_pipeline(
        source=MemoryEntrySource(_rows(3)),
        config=_config(),
        uow=make_unit_of_work(sink=sink),
    )

    assert counters.errors == 1
    assert counters.processed == 3


def test_run_logs_created_resources_and_summary(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        counters = run_import_pipeline(
            source=MemoryEntrySource(_rows(1)),
            config=_config(),
            uow=make_unit_of_work(),
        )

    assert counters.processed == 1
    assert "Created item #101" in caplog.text
    assert (
        "End of process: 1 resources to process, 0 skipped, 1 processed, 0 errors." in caplog.text
    )


def test_pipeline_ends_in_done_state() -> None:
    lookup = FakeLookup()
    resolver = IdentifierResolver(FakeIdentifierStore(), lookup)
    config = _config()
    pipeline = BatchImportPipeline(
        builder=ResourceBuilder(
            prototype=config.prototype(),
            mapping=compile_mapping(MAPPING, lookup),
            resolver=resolver,
            lookup=lookup,
            identifier_names=(10,),
        ),
        checker=DraftChecker(resolver=resolver, identifier_names=(10,)),
        sink=RecordingSink(),
        resource_type=ResourceType.ITEMS,
        batch_size=2,
    )

    assert pipeline.state is PipelineState.INIT
    pipeline.run(MemoryEntrySource(_rows(3)))
    assert pipeline.state is PipelineState.DONE
    assert pipeline.counters.processed == 3
