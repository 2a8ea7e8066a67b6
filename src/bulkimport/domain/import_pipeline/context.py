"""Run configuration, counters and pipeline state for one import run."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from bulkimport.domain.model import DuplicatePolicy, ResourceDraft

if TYPE_CHECKING:
    from bulkimport.domain.identifiers import IdentifierName
    from bulkimport.domain.model import ResourceType

DEFAULT_ENTRIES_BY_BATCH: Final[int] = 20
DEFAULT_IDENTIFIER_NAMES: Final[tuple[str, ...]] = ("o:id", "dcterms:identifier")
CURRENT_OWNER: Final[str] = "current"


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything a run needs besides its collaborators.

    ``owner`` is either a user id or ``"current"``, in which case the injected
    ``caller_id`` owns the created resources.
    """

    resource_type: ResourceType
    mapping: Mapping[str, Sequence[str]] = field(default_factory=dict[str, Sequence[str]])
    identifier_names: tuple[IdentifierName, ...] = DEFAULT_IDENTIFIER_NAMES
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.REJECT
    entries_by_batch: int | None = None
    template_id: int | None = None
    class_id: int | None = None
    owner: int | str = CURRENT_OWNER
    caller_id: int | None = None
    is_public: bool = True

    @property
    def batch_size(self) -> int:
        if self.entries_by_batch and self.entries_by_batch > 0:
            return self.entries_by_batch
        return DEFAULT_ENTRIES_BY_BATCH

    @property
    def owner_id(self) -> int | None:
        if not self.owner or self.owner == CURRENT_OWNER:
            return self.caller_id
        return int(self.owner)

    def prototype(self) -> ResourceDraft:
        """Draft every entry of the run starts from."""

        return ResourceDraft(
            resource_type=self.resource_type,
            owner_id=self.owner_id,
            is_public=self.is_public,
            template_id=self.template_id,
            class_id=self.class_id,
        )


class PipelineState(StrEnum):
    INIT = "init"
    STREAMING = "streaming"
    ACCUMULATING = "accumulating"
    FLUSHING = "flushing"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass(slots=True)
class RunCounters:
    """Monotonic per-run counters."""

    seen: int = 0
    skipped: int = 0
    processed: int = 0
    errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
