"""Run the bundled Alembic migrations against an engine or a database URI."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from bulkimport.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
PROJECT_ROOT: Final[Path] = MIGRATIONS_PATH.parents[4]
PYPROJECT_PATH: Final[Path] = PROJECT_ROOT / "pyproject.toml"
_PATH_OPTIONS: Final = frozenset({"script_location", "prepend_sys_path"})


def _pyproject_options() -> dict[str, str]:
    """``[tool.alembic]`` of the checkout, or nothing for an installed package."""

    if not PYPROJECT_PATH.is_file():
        return {}
    with PYPROJECT_PATH.open("rb") as handle:
        section = tomllib.load(handle).get("tool", {}).get("alembic", {})
    return {str(key): str(value) for key, value in section.items()}


def _project_path(value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else (PROJECT_ROOT / path).resolve()


def _build_config() -> Config:
    options = _pyproject_options()
    config = Config()

    scripts = _project_path(options["script_location"]) if "script_location" in options else None
    config.set_main_option(
        "script_location", str(scripts if scripts and scripts.is_dir() else MIGRATIONS_PATH)
    )
    config.set_main_option(
        "prepend_sys_path", str(_project_path(options.get("prepend_sys_path", ".")))
    )
    for key, value in options.items():
        if key not in _PATH_OPTIONS:
            config.set_main_option(key, value)
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Bring the schema to the latest revision.

    With ``engine`` the migration runs on one of its connections and commits
    with it; otherwise Alembic connects to ``database_uri`` (default: the
    configured database).
    """

    config = _build_config()
    if engine is None:
        config.set_main_option("sqlalchemy.url", database_uri or get_database_config().uri)
        command.upgrade(config, "head")
        return
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
