"""Batch import pipeline.

Entries stream from an ``EntrySource`` through a ``ResourceBuilder`` (mapping
to drafts) and a ``DraftChecker`` (duplicate policy and validation); accepted
drafts are written through a ``BulkWriteSink`` in batches of
``RunConfig.batch_size`` entries.
"""

from __future__ import annotations

from .builder import ResourceBuilder
from .checks import DraftChecker, check_draft, identifiers_of
from .context import (
    CURRENT_OWNER,
    DEFAULT_ENTRIES_BY_BATCH,
    DEFAULT_IDENTIFIER_NAMES,
    PipelineState,
    RunConfig,
    RunCounters,
)
from .identifier_names import prepare_identifier_names
from .mapping import compile_mapping, compile_target, split_target
from .runner import BatchImportPipeline, run_import_pipeline
from .values import coerce_bool, convert_value

__all__ = [
    "CURRENT_OWNER",
    "DEFAULT_ENTRIES_BY_BATCH",
    "DEFAULT_IDENTIFIER_NAMES",
    "BatchImportPipeline",
    "DraftChecker",
    "PipelineState",
    "ResourceBuilder",
    "RunConfig",
    "RunCounters",
    "check_draft",
    "coerce_bool",
    "compile_mapping",
    "compile_target",
    "convert_value",
    "identifiers_of",
    "prepare_identifier_names",
    "run_import_pipeline",
    "split_target",
]
