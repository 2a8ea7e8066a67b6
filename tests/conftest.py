from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session

from bulkimport.adapters.sqlalchemy.migrations import upgrade_head
from bulkimport.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    create_database_engine,
    shutdown,
    startup,
)
from tests.helpers.fakes import FakeIdentifierStore, FakeLookup, RecordingSink

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_database_engine("sqlite+pysqlite:///:memory:")
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    with Session(sqlite_engine) as session:
        yield session


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyImportUnitOfWork]]:
    """Bind the adapter to the migrated in-memory engine for app-level tests."""
    startup(engine=sqlite_engine, force=True)
    yield SqlAlchemyImportUnitOfWork
    shutdown()


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture
def store() -> FakeIdentifierStore:
    return FakeIdentifierStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
