"""Text helpers shared by identifier resolution and value mapping."""

from __future__ import annotations

import re

_EDGE_SPACES = re.compile(r"^[\s\u200b\u2060\ufeff]+|[\s\u200b\u2060\ufeff]+$")


def trim_unicode(value: str) -> str:
    """Strip Unicode whitespace (and zero-width marks) from both ends."""

    return _EDGE_SPACES.sub("", value)


def split_values(value: str, separator: str) -> list[str]:
    """Split a raw cell on ``separator``, trim each part and drop empty ones.

    Duplicates are preserved: only identifier queries deduplicate.
    """

    parts = value.split(separator) if separator else [value]
    trimmed = (trim_unicode(part) for part in parts)
    return [part for part in trimmed if part]


def parse_field_header(header: str) -> tuple[str, str | None, str | None]:
    """Split ``"name @lang ^^datatype"`` into ``(name, language, datatype)``.

    Markers must be separated from the name by whitespace; either may be
    omitted and they may come in any order.
    """

    name_parts: list[str] = []
    language: str | None = None
    datatype: str | None = None
    for token in trim_unicode(header).split():
        if token.startswith("^^") and len(token) > 2:
            datatype = token[2:]
        elif token.startswith("@") and len(token) > 1:
            language = token[1:]
        else:
            name_parts.append(token)
    return " ".join(name_parts), language, datatype
