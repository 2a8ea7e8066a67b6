"""Where the import database lives.

``DATABASE_URI`` wins outright. Otherwise a SQLite file is kept under
``BULKIMPORT_DATA_DIR``, or the platform's per-user data directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Self

APP_DIR_NAME: Final[str] = "bulkimport"
DEFAULT_DB_FILENAME: Final[str] = "bulkimport.db"

DATA_DIR_ENV: Final[str] = "BULKIMPORT_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @classmethod
    def from_env(cls) -> Self:
        override = os.getenv(DATA_DIR_ENV)
        return cls(data_dir=Path(override) if override else _platform_data_home() / APP_DIR_NAME)

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, ensure: bool = True) -> Path:
        """Path of the SQLite file; ``ensure`` creates its directory first."""

        directory = self.resolve_data_dir()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    @classmethod
    def from_env(cls, storage: StorageConfig | None = None) -> Self:
        uri = os.getenv(DATABASE_URI_ENV)
        if not uri:
            uri = (storage or StorageConfig.from_env()).database_uri()
        return cls(uri=uri)


def get_storage_config() -> StorageConfig:
    return StorageConfig.from_env()


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    return DatabaseConfig.from_env(storage)
