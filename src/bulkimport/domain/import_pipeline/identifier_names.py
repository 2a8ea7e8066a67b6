"""Normalize the configured identifier names once per run."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from bulkimport.domain.identifiers import INTERNAL_ID_NAMES, MEDIA_INGESTERS, MediaSourceName

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bulkimport.domain.identifiers import IdentifierName
    from bulkimport.domain.ports import NameLookup

log = getLogger(__name__)


def prepare_identifier_names(
    names: Iterable[IdentifierName],
    lookup: NameLookup,
) -> tuple[IdentifierName, ...]:
    """Return usable identifier names in configured order, without duplicates.

    Internal id names collapse to ``"o:id"``, property terms become property
    ids and media ingesters are kept as they are. Unknown names are dropped.
    An empty result disables duplicate detection for the run.
    """

    configured = list(names)
    if not configured:
        log.warning("No identifier name was configured: duplicates cannot be detected.")
        return ()

    prepared: dict[IdentifierName, None] = {}
    for name in configured:
        if isinstance(name, MediaSourceName):
            prepared[name] = None
            continue
        if isinstance(name, str):
            name = name.strip()
            if not name:
                continue
            if name in INTERNAL_ID_NAMES:
                prepared["o:id"] = None
                continue
            if name in MEDIA_INGESTERS:
                prepared[name] = None
                continue
        property_id = lookup.find_property_id(name)
        if property_id is None:
            log.warning("Identifier name %r is not a known property and is ignored.", name)
            continue
        prepared[property_id] = None

    if not prepared:
        log.error("Invalid identifier names %r: check the run configuration.", configured)
    return tuple(prepared)
