"""Resolve human-readable identifiers to resource ids."""

from __future__ import annotations

from .names import (
    INTERNAL_ID_NAMES,
    MEDIA_INGESTERS,
    RESOURCE_TYPE_ALIASES,
    IdentifierName,
    MediaSourceName,
    UnsupportedIdentifierQuery,
    parse_resource_type,
)
from .query import IdentifierQuery, build_query, clean_identifiers
from .resolve import IdentifierResolver, Resolution, pick_matches

__all__ = [
    "INTERNAL_ID_NAMES",
    "MEDIA_INGESTERS",
    "RESOURCE_TYPE_ALIASES",
    "IdentifierName",
    "IdentifierQuery",
    "IdentifierResolver",
    "MediaSourceName",
    "Resolution",
    "UnsupportedIdentifierQuery",
    "build_query",
    "clean_identifiers",
    "parse_resource_type",
    "pick_matches",
]
