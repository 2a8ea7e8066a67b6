"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from bulkimport.adapters.sources import CsvEntrySource
from bulkimport.adapters.sqlalchemy.seed import (
    DCMI_TYPES,
    DUBLIN_CORE,
    ensure_user,
    ensure_vocabulary,
)
from bulkimport.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from bulkimport.config.job import load_job
from bulkimport.domain.import_pipeline import run_import_pipeline

if TYPE_CHECKING:
    from pathlib import Path

    from bulkimport.domain.import_pipeline import RunConfig, RunCounters
    from bulkimport.domain.ports import EntrySource, ImportUnitOfWork

type UnitOfWorkFactory = Callable[[], ImportUnitOfWork]


log = getLogger(__name__)


def _ensure_started(database_uri: str | None = None) -> None:
    if not is_started():
        startup(database_uri=database_uri)


def initialize_database(*, database_uri: str | None = None, seed: bool = True) -> None:
    """Migrate the schema and register the bundled vocabularies."""

    _ensure_started(database_uri)
    if not seed:
        return
    with SqlAlchemyImportUnitOfWork() as uow:
        for vocabulary in (DUBLIN_CORE, DCMI_TYPES):
            ensure_vocabulary(uow.session, vocabulary)
        uow.commit()
    log.info("Database initialised")


def create_user(*, email: str, name: str) -> int:
    """Register a user that can own imported resources."""

    _ensure_started()
    with SqlAlchemyImportUnitOfWork() as uow:
        user_id = ensure_user(uow.session, email=email, name=name)
        uow.commit()
    return user_id


def run_import(
    *,
    config: RunConfig,
    source: EntrySource,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RunCounters:
    """Import every entry of ``source`` according to ``config``."""

    if unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyImportUnitOfWork
    log.info(
        "Starting import: resource_type=%s, batch_size=%s, duplicates=%s",
        config.resource_type,
        config.batch_size,
        config.duplicate_policy,
    )

    with effective_uow() as uow:
        counters = run_import_pipeline(source=source, config=config, uow=uow)

    log.info(
        "Finished import: seen=%s, skipped=%s, processed=%s, errors=%s",
        counters.seen,
        counters.skipped,
        counters.processed,
        counters.errors,
    )
    return counters


def import_file(
    *,
    job_path: str | Path,
    source_path: str | Path,
    caller_id: int | None = None,
    entries_by_batch: int | None = None,
    separator: str | None = None,
    delimiter: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RunCounters:
    """Run the job file ``job_path`` over the delimited file ``source_path``.

    Command line values override the job's separator, delimiter and batch size.
    """

    job = load_job(job_path)
    source = CsvEntrySource.from_path(
        source_path,
        separator=job.separator if separator is None else separator,
        delimiter=delimiter or job.delimiter,
    )
    config = job.to_run_config(caller_id=caller_id, entries_by_batch=entries_by_batch)
    return run_import(config=config, source=source, unit_of_work_factory=unit_of_work_factory)
