"""Alembic environment for the bulkimport schema.

``upgrade_head(engine=...)`` hands over an open connection through
``config.attributes["connection"]``; otherwise a throwaway engine is built
from ``sqlalchemy.url`` or the configured database URI.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from bulkimport.adapters.sqlalchemy.mappings import mapper_registry
from bulkimport.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config

if config.config_file_name is not None and Path(config.config_file_name).suffix == ".ini":
    from logging.config import fileConfig

    fileConfig(config.config_file_name)

target_metadata = mapper_registry.metadata

# SQLite cannot ALTER most constraints in place: batch mode recreates tables.
MIGRATION_OPTIONS = {"render_as_batch": True, "compare_type": True}


def _database_uri() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    context.configure(
        url=_database_uri(),
        target_metadata=target_metadata,
        literal_binds=True,
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection: Connection | None = config.attributes.get("connection")
    if connection is not None:
        _migrate(connection)
        return

    engine = create_engine(_database_uri(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as new_connection:
            _migrate(new_connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
