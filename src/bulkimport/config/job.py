"""Import job files (TOML or JSON) validated with pydantic."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Literal, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bulkimport.config.errors import JobFileError
from bulkimport.domain.import_pipeline import (
    CURRENT_OWNER,
    DEFAULT_IDENTIFIER_NAMES,
    RunConfig,
)
from bulkimport.domain.model import DuplicatePolicy, ResourceType

_RESOURCE_TYPE_NAMES: dict[str, ResourceType] = {
    "item": ResourceType.ITEMS,
    "items": ResourceType.ITEMS,
    "item_set": ResourceType.ITEM_SETS,
    "item_sets": ResourceType.ITEM_SETS,
    "itemset": ResourceType.ITEM_SETS,
    "media": ResourceType.MEDIA,
}


class ImportJob(BaseModel):
    """Declarative description of one import run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    resource_type: ResourceType
    mapping: dict[str, list[str]] = Field(default_factory=dict)
    identifier_names: list[str | int] = Field(
        default_factory=lambda: list(DEFAULT_IDENTIFIER_NAMES)
    )
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.REJECT
    entries_by_batch: int | None = Field(default=None, ge=1)
    template_id: int | None = Field(default=None, ge=1)
    class_id: int | None = Field(default=None, ge=1)
    owner: int | Literal["current"] = CURRENT_OWNER
    is_public: bool = True
    separator: str = ""
    delimiter: str | None = None

    @field_validator("resource_type", mode="before")
    @classmethod
    def _parse_resource_type(cls, value: object) -> object:
        if isinstance(value, str):
            return _RESOURCE_TYPE_NAMES.get(value.strip().lower().replace(" ", "_"), value)
        return value

    @field_validator("mapping", mode="before")
    @classmethod
    def _listify_targets(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        targets = cast(Mapping[str, object], value)
        return {
            str(source): [target] if isinstance(target, str) else target
            for source, target in targets.items()
        }

    @field_validator("duplicate_policy", mode="before")
    @classmethod
    def _parse_policy(cls, value: object) -> object:
        if isinstance(value, bool):
            return DuplicatePolicy.ALLOW if value else DuplicatePolicy.REJECT
        return value

    def to_run_config(
        self,
        *,
        caller_id: int | None = None,
        entries_by_batch: int | None = None,
    ) -> RunConfig:
        return RunConfig(
            resource_type=self.resource_type,
            mapping={source: tuple(targets) for source, targets in self.mapping.items()},
            identifier_names=tuple(self.identifier_names),
            duplicate_policy=self.duplicate_policy,
            entries_by_batch=entries_by_batch or self.entries_by_batch,
            template_id=self.template_id,
            class_id=self.class_id,
            owner=self.owner,
            caller_id=caller_id,
            is_public=self.is_public,
        )


def parse_job(document: Mapping[str, object], *, origin: str = "<job>") -> ImportJob:
    try:
        return ImportJob.model_validate(document)
    except ValidationError as exc:
        raise JobFileError(f"Invalid import job {origin}: {exc}") from exc


def load_job(path: str | Path) -> ImportJob:
    """Read and validate a ``.toml`` or ``.json`` job file."""

    job_path = Path(path).expanduser()
    suffix = job_path.suffix.lower()
    try:
        if suffix == ".toml":
            with job_path.open("rb") as handle:
                document: object = tomllib.load(handle)
        elif suffix == ".json":
            with job_path.open(encoding="utf-8") as handle:
                document = json.load(handle)
        else:
            raise JobFileError(f"Unsupported job file type {suffix!r}: use .toml or .json")
    except OSError as exc:
        raise JobFileError(f"Cannot read job file {job_path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise JobFileError(f"Cannot parse job file {job_path}: {exc}") from exc

    if not isinstance(document, Mapping):
        raise JobFileError(f"Job file {job_path} must contain a table/object at the top level")
    return parse_job(cast(Mapping[str, object], document), origin=str(job_path))
