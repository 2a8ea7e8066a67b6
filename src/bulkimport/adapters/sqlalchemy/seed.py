"""Idempotent inserts for registry rows (vocabularies, users, templates)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from sqlalchemy import insert, select

from bulkimport.adapters.sqlalchemy.mappings import (
    property_table,
    resource_class_table,
    resource_template_table,
    user_table,
    vocabulary_table,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VocabularySeed:
    prefix: str
    namespace_uri: str
    label: str
    properties: Mapping[str, str] = field(default_factory=dict[str, str])
    classes: Mapping[str, str] = field(default_factory=dict[str, str])


DUBLIN_CORE: Final = VocabularySeed(
    prefix="dcterms",
    namespace_uri="http://purl.org/dc/terms/",
    label="Dublin Core",
    properties={
        "title": "Title",
        "creator": "Creator",
        "subject": "Subject",
        "description": "Description",
        "publisher": "Publisher",
        "contributor": "Contributor",
        "date": "Date",
        "type": "Type",
        "format": "Format",
        "identifier": "Identifier",
        "source": "Source",
        "language": "Language",
        "relation": "Relation",
        "isPartOf": "Is Part Of",
        "hasPart": "Has Part",
        "coverage": "Coverage",
        "rights": "Rights",
    },
)

DCMI_TYPES: Final = VocabularySeed(
    prefix="dctype",
    namespace_uri="http://purl.org/dc/dcmitype/",
    label="Dublin Core Type",
    classes={
        "Collection": "Collection",
        "Image": "Image",
        "Sound": "Sound",
        "StillImage": "Still Image",
        "Text": "Text",
    },
)


def ensure_vocabulary(session: Session, seed: VocabularySeed) -> int:
    """Insert the vocabulary and its missing properties and classes; return its id."""

    vocabulary_id = session.execute(
        select(vocabulary_table.c.id).where(vocabulary_table.c.prefix == seed.prefix)
    ).scalar()
    if vocabulary_id is None:
        result = session.execute(
            insert(vocabulary_table).values(
                prefix=seed.prefix,
                namespace_uri=seed.namespace_uri,
                label=seed.label,
            )
        )
        vocabulary_id = result.inserted_primary_key[0]  # pyright: ignore[reportOptionalSubscript]
        log.info("Created vocabulary %s", seed.prefix)

    for table, names in ((property_table, seed.properties), (resource_class_table, seed.classes)):
        existing = set(
            session.execute(
                select(table.c.local_name).where(table.c.vocabulary_id == vocabulary_id)
            ).scalars()
        )
        missing = [
            {"vocabulary_id": vocabulary_id, "local_name": local_name, "label": label}
            for local_name, label in names.items()
            if local_name not in existing
        ]
        if missing:
            session.execute(insert(table), missing)
    return int(vocabulary_id)


def ensure_user(session: Session, *, email: str, name: str) -> int:
    user_id = session.execute(
        select(user_table.c.id).where(user_table.c.email == email)
    ).scalar()
    if user_id is None:
        result = session.execute(insert(user_table).values(email=email, name=name))
        user_id = result.inserted_primary_key[0]  # pyright: ignore[reportOptionalSubscript]
        log.info("Created user %s", email)
    return int(user_id)


def ensure_resource_template(session: Session, label: str) -> int:
    template_id = session.execute(
        select(resource_template_table.c.id).where(resource_template_table.c.label == label)
    ).scalar()
    if template_id is None:
        result = session.execute(insert(resource_template_table).values(label=label))
        template_id = result.inserted_primary_key[0]  # pyright: ignore[reportOptionalSubscript]
    return int(template_id)
