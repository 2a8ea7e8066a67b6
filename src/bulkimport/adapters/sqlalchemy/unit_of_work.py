"""SQLAlchemy-backed unit of work for import runs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from bulkimport.adapters.sqlalchemy.identifiers import SqlAlchemyIdentifierStore
from bulkimport.adapters.sqlalchemy.migrations import upgrade_head
from bulkimport.adapters.sqlalchemy.vocabulary import SqlAlchemyVocabulary
from bulkimport.adapters.sqlalchemy.writer import SqlAlchemyBulkWriteSink
from bulkimport.common.errors import BulkImportError
from bulkimport.config import get_database_config
from bulkimport.domain.ports import ImportRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine


class StartupError(BulkImportError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


def create_database_engine(database_uri: str) -> Engine:
    """Create an engine.

    SQLite engines get an explicit ``BEGIN`` so savepoints work, and a
    Unicode-aware ``lower()`` for case-insensitive identifier matching.
    """

    engine = create_engine(database_uri, future=True)
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine)
    return engine


def _configure_sqlite(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _configure_pysqlite_connection(  # pyright: ignore[reportUnusedFunction]
        dbapi_connection: Any,
        connection_record: Any,
    ) -> None:
        _ = connection_record
        # pysqlite defers BEGIN until the first DML statement, which breaks SAVEPOINT.
        dbapi_connection.isolation_level = None
        # The built-in lower() only folds ASCII.
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    @event.listens_for(engine, "begin")
    def _emit_begin(connection: Connection) -> None:  # pyright: ignore[reportUnusedFunction]
        connection.exec_driver_sql("BEGIN")


def _unicode_lower(value: object) -> object:
    return value.lower() if isinstance(value, str) else value


@dataclass(slots=True)
class _AdapterState:
    """Engine shared by every unit of work of the process."""

    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False) if engine else None

    def require_sessions(self) -> sessionmaker[Session]:
        if self.sessions is None:
            raise StartupError(
                "The database is not initialised: call "
                "bulkimport.adapters.sqlalchemy.unit_of_work.startup() first."
            )
        return self.sessions


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one) after migrating its schema.

    Raises ``StartupError`` when already started, unless ``force`` is set.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("The database is already initialised. Pass force=True to rebind.")

    resolved_engine = engine or create_database_engine(
        database_uri or get_database_config().uri
    )
    upgrade_head(engine=resolved_engine)
    _STATE.bind(resolved_engine)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it (tests rebind per case)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block; subclasses choose the repositories built on it.

    Leaving the block on an exception rolls back. Nothing is committed
    implicitly: callers commit each batch themselves.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self.session_factory = session_factory or _STATE.require_sessions()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("This unit of work is already open")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("The unit of work is not open: use it in a with block")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("The unit of work is not open: use it in a with block")
        return self._repositories


class SqlAlchemyImportUnitOfWork(BaseSqlAlchemyUnitOfWork[ImportRepositories]):
    """Identifier store, vocabulary and writer sharing one session."""

    def _build_repositories(self, session: Session) -> ImportRepositories:
        return ImportRepositories(
            identifiers=SqlAlchemyIdentifierStore(session),
            vocabulary=SqlAlchemyVocabulary(session),
            writer=SqlAlchemyBulkWriteSink(session),
        )
