"""Port for the repository's resource creation API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkimport.domain.model import CreatedResource, ResourceDraft, ResourceType


@runtime_checkable
class BulkWriteSink(Protocol):
    """Create resources one at a time or in batches.

    Both methods raise ``WriteError`` when the store rejects the call as a whole.
    With ``continue_on_error`` a batch skips the drafts that fail and returns
    only the created resources.
    """

    def create_one(self, resource_type: ResourceType, draft: ResourceDraft) -> CreatedResource: ...

    def create_many(
        self,
        resource_type: ResourceType,
        drafts: Sequence[ResourceDraft],
        *,
        continue_on_error: bool = True,
    ) -> list[CreatedResource]: ...
