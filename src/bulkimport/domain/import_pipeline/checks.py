"""Duplicate detection and validation of built drafts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bulkimport.common.reporting import RunReporter
from bulkimport.domain.identifiers import MediaSourceName
from bulkimport.domain.model import DuplicatePolicy, LiteralValue, ResourceType, UriValue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkimport.domain.identifiers import IdentifierName, IdentifierResolver
    from bulkimport.domain.model import ResourceDraft


class DraftChecker:
    """Look drafts up by their identifiers and apply the duplicate policy."""

    def __init__(
        self,
        *,
        resolver: IdentifierResolver,
        identifier_names: Sequence[IdentifierName],
        policy: DuplicatePolicy = DuplicatePolicy.REJECT,
        reporter: RunReporter | None = None,
    ) -> None:
        self.resolver = resolver
        self.identifier_names = tuple(identifier_names)
        self.policy = policy
        self.reporter = reporter or RunReporter.for_module(__name__)

    def check(self, draft: ResourceDraft, *, index: int | None = None) -> bool:
        """Return whether ``draft`` may be written; mark it as errored otherwise."""

        if draft.resource_id is None:
            self.find_existing(draft)

        if draft.resource_id is not None:
            draft.is_duplicate = True
            if self.policy is DuplicatePolicy.ALLOW:
                self.reporter.warn(
                    "Index #{index}: the identifier is not unique (#{resource_id}). "
                    "A new resource is created.",
                    index=index,
                    resource_id=draft.resource_id,
                )
            else:
                draft.has_error = True
                self.reporter.error(
                    "Index #{index}: the identifier is already used by #{resource_id}. "
                    "The entry is skipped.",
                    index=index,
                    resource_id=draft.resource_id,
                )

        self._validate(draft, index)
        return not draft.has_error

    def find_existing(self, draft: ResourceDraft) -> int | None:
        """Fill ``draft.resource_id`` from the first identifier name with a match."""

        for name in self.identifier_names:
            candidates = identifiers_of(draft, name)
            if not candidates:
                continue
            result = self.resolver.find(candidates, name, draft.resource_type)
            resource_id = next((value for value in result.values() if value is not None), None)
            if resource_id is not None:
                draft.resource_id = resource_id
                draft.id_checked = draft.resource_type is not None
                return resource_id
        return None

    def _validate(self, draft: ResourceDraft, index: int | None) -> None:
        if draft.resource_type is not ResourceType.MEDIA:
            return
        if draft.item_id is None:
            draft.has_error = True
            self.reporter.error(
                "Index #{index}: a media requires a parent item. The entry is skipped.",
                index=index,
            )
        if not draft.ingester or not draft.source:
            draft.has_error = True
            self.reporter.error(
                "Index #{index}: a media requires a url or a file. The entry is skipped.",
                index=index,
            )


def identifiers_of(draft: ResourceDraft, name: IdentifierName) -> list[str]:
    """Return the draft values an identifier name can look up."""

    if isinstance(name, MediaSourceName):
        ingester = name.ingester
    elif isinstance(name, str):
        ingester = name
    else:
        return [
            value.value if isinstance(value, LiteralValue) else value.uri
            for value in draft.values_for(name)
            if isinstance(value, LiteralValue | UriValue)
        ]
    if draft.ingester == ingester and draft.source:
        return [draft.source]
    return []


def check_draft(
    draft: ResourceDraft,
    *,
    resolver: IdentifierResolver,
    identifier_names: Sequence[IdentifierName],
    policy: DuplicatePolicy = DuplicatePolicy.REJECT,
    index: int | None = None,
) -> bool:
    """Check a single draft without keeping a ``DraftChecker`` around."""

    checker = DraftChecker(resolver=resolver, identifier_names=identifier_names, policy=policy)
    return checker.check(draft, index=index)
