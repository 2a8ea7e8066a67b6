"""Streaming batch pipeline: build, check and write entries in batches."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bulkimport.common.errors import WriteError
from bulkimport.common.reporting import RunReporter
from bulkimport.domain.identifiers import IdentifierResolver

from .builder import ResourceBuilder
from .checks import DraftChecker
from .context import DEFAULT_ENTRIES_BY_BATCH, PipelineState, RunCounters
from .identifier_names import prepare_identifier_names
from .mapping import compile_mapping

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bulkimport.domain.model import CreatedResource, ResourceDraft, ResourceType
    from bulkimport.domain.ports import BulkWriteSink, Entry, EntrySource, ImportUnitOfWork

    from .context import RunConfig


def _noop() -> None:
    return None


@dataclass(slots=True)
class BatchImportPipeline:
    """Stream entries through the builder and checker, flushing every ``batch_size`` entries.

    ``commit`` runs after a successful flush and ``rollback`` after a rejected
    one, so each batch is its own transaction when wired to a unit of work.
    """

    builder: ResourceBuilder
    checker: DraftChecker
    sink: BulkWriteSink
    resource_type: ResourceType
    batch_size: int = DEFAULT_ENTRIES_BY_BATCH
    commit: Callable[[], None] = _noop
    rollback: Callable[[], None] = _noop
    reporter: RunReporter = field(default_factory=lambda: RunReporter.for_module(__name__))
    counters: RunCounters = field(default_factory=RunCounters)
    state: PipelineState = PipelineState.INIT

    def run(self, entries: Iterable[Entry]) -> RunCounters:
        """Process every entry once and return the run counters."""

        self.counters = RunCounters()
        self.state = PipelineState.STREAMING
        pending: list[ResourceDraft] = []

        for index, entry in enumerate(entries, start=1):
            self.counters.seen += 1
            self.reporter.notice("Processing resource index #{index}", index=index)

            draft = self.builder.build(entry, index=index)
            if draft is None:
                self.counters.skipped += 1
                self.reporter.warn(
                    "Resource index #{index} is empty and is skipped.", index=index
                )
            elif self.checker.check(draft, index=index):
                self.counters.processed += 1
                pending.append(draft)
                self.state = PipelineState.ACCUMULATING
            else:
                self.counters.errors += 1

            if len(pending) >= self.batch_size:
                self._flush(pending)
                pending = []

        self.state = PipelineState.FINALIZING
        self._flush(pending)
        self.state = PipelineState.DONE

        self.reporter.notice(
            "End of process: {total} resources to process, {skipped} skipped, "
            "{processed} processed, {errors} errors.",
            total=self.counters.seen,
            skipped=self.counters.skipped,
            processed=self.counters.processed,
            errors=self.counters.errors,
        )
        return self.counters

    def _flush(self, drafts: list[ResourceDraft]) -> None:
        if not drafts:
            return

        previous_state = self.state
        self.state = PipelineState.FLUSHING
        label = self.resource_type.label
        try:
            created: list[CreatedResource]
            if len(drafts) == 1:
                created = [self.sink.create_one(self.resource_type, drafts[0])]
            else:
                created = self.sink.create_many(self.resource_type, drafts, continue_on_error=True)
            self.commit()
        except WriteError as exc:
            self.rollback()
            self.counters.errors += len(drafts)
            self.reporter.error(
                "Core error during creation of {count} {resource_type}: {exception}",
                count=len(drafts),
                resource_type=label,
                exception=exc,
                exc_info=exc,
            )
        else:
            failed = len(drafts) - len(created)
            if failed:
                self.counters.errors += failed
                self.reporter.warn(
                    "{failed} of {count} {resource_type} could not be created.",
                    failed=failed,
                    count=len(drafts),
                    resource_type=label,
                )
            for resource in created:
                self.reporter.notice(
                    "Created {resource_type} #{resource_id}",
                    resource_type=label,
                    resource_id=resource.id,
                )
        finally:
            self.state = (
                PipelineState.FINALIZING
                if previous_state is PipelineState.FINALIZING
                else PipelineState.STREAMING
            )


def run_import_pipeline(
    *,
    source: EntrySource,
    config: RunConfig,
    uow: ImportUnitOfWork,
    reporter: RunReporter | None = None,
) -> RunCounters:
    """Wire the default pipeline for ``config`` against ``uow`` and run it over ``source``."""

    active_reporter = reporter or RunReporter.for_module(__name__)
    repositories = uow.repositories
    lookup = repositories.vocabulary
    resolver = IdentifierResolver(repositories.identifiers, lookup)

    identifier_names = prepare_identifier_names(config.identifier_names, lookup)
    mapping = compile_mapping(config.mapping, lookup)
    if not mapping:
        active_reporter.warn("The mapping has no usable target: entries will be empty.")

    builder = ResourceBuilder(
        prototype=config.prototype(),
        mapping=mapping,
        resolver=resolver,
        lookup=lookup,
        identifier_names=identifier_names,
        separator=source.separator,
        reporter=active_reporter,
    )
    checker = DraftChecker(
        resolver=resolver,
        identifier_names=identifier_names,
        policy=config.duplicate_policy,
        reporter=active_reporter,
    )
    pipeline = BatchImportPipeline(
        builder=builder,
        checker=checker,
        sink=repositories.writer,
        resource_type=config.resource_type,
        batch_size=config.batch_size,
        commit=uow.commit,
        rollback=uow.rollback,
        reporter=active_reporter,
    )
    return pipeline.run(source)
