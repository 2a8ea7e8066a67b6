"""Bulk write sink creating resources with SQLAlchemy Core inserts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select
from sqlalchemy.exc import SQLAlchemyError

from bulkimport.adapters.sqlalchemy.mappings import (
    item_item_set_table,
    item_set_table,
    item_table,
    media_table,
    property_table,
    resource_table,
    value_table,
    vocabulary_table,
)
from bulkimport.common.errors import WriteError
from bulkimport.domain.model import (
    CreatedResource,
    LiteralValue,
    ResourceType,
    ResourceValue,
    UriValue,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session

    from bulkimport.domain.model import MediaDraft, PropertyValue, ResourceDraft

log = logging.getLogger(__name__)

TITLE_TERM = ("dcterms", "title")


class SqlAlchemyBulkWriteSink:
    """Insert drafts as new resources inside the session's transaction.

    Each draft of a ``continue_on_error`` batch runs in its own savepoint, so a
    failing draft is rolled back alone and skipped.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self._title_property_id: int | None = None
        self._title_property_loaded = False

    def create_one(self, resource_type: ResourceType, draft: ResourceDraft) -> CreatedResource:
        try:
            with self.session.begin_nested():
                return self._create(resource_type, draft)
        except SQLAlchemyError as exc:
            raise WriteError(f"Cannot create {resource_type.label}: {exc}") from exc

    def create_many(
        self,
        resource_type: ResourceType,
        drafts: Sequence[ResourceDraft],
        *,
        continue_on_error: bool = True,
    ) -> list[CreatedResource]:
        if not continue_on_error:
            try:
                with self.session.begin_nested():
                    return [self._create(resource_type, draft) for draft in drafts]
            except SQLAlchemyError as exc:
                raise WriteError(
                    f"Cannot create {len(drafts)} {resource_type.label}: {exc}"
                ) from exc

        created: list[CreatedResource] = []
        for position, draft in enumerate(drafts, start=1):
            try:
                with self.session.begin_nested():
                    created.append(self._create(resource_type, draft))
            except SQLAlchemyError as exc:
                log.warning(
                    "Skipping %s %d of %d after a store error: %s",
                    resource_type.label,
                    position,
                    len(drafts),
                    exc,
                )
        return created

    # Inserts -----------------------------------------------------------------

    def _create(self, resource_type: ResourceType, draft: ResourceDraft) -> CreatedResource:
        resource_id = self._insert_resource(resource_type, draft, draft.values)

        if resource_type is ResourceType.ITEMS:
            self.session.execute(insert(item_table).values(id=resource_id))
            if draft.item_set_ids:
                self.session.execute(
                    insert(item_item_set_table),
                    [
                        {"item_id": resource_id, "item_set_id": item_set_id}
                        for item_set_id in draft.item_set_ids
                    ],
                )
            for position, media in enumerate(draft.media, start=1):
                self._insert_attached_media(draft, media, resource_id, position)
        elif resource_type is ResourceType.ITEM_SETS:
            self.session.execute(
                insert(item_set_table).values(id=resource_id, is_open=bool(draft.is_open))
            )
        elif resource_type is ResourceType.MEDIA:
            self.session.execute(
                insert(media_table).values(
                    id=resource_id,
                    item_id=draft.item_id,
                    ingester=draft.ingester,
                    source=draft.source,
                    position=self._next_media_position(draft.item_id),
                )
            )

        return CreatedResource(resource_type=resource_type, id=resource_id)

    def _insert_attached_media(
        self,
        item: ResourceDraft,
        media: MediaDraft,
        item_id: int,
        position: int,
    ) -> None:
        media_id = self._insert_resource(ResourceType.MEDIA, item, media.values)
        self.session.execute(
            insert(media_table).values(
                id=media_id,
                item_id=item_id,
                ingester=media.ingester,
                source=media.source,
                position=position,
            )
        )

    def _insert_resource(
        self,
        resource_type: ResourceType,
        draft: ResourceDraft,
        values: Sequence[PropertyValue],
    ) -> int:
        result = self.session.execute(
            insert(resource_table).values(
                resource_type=resource_type,
                owner_id=draft.owner_id,
                resource_class_id=draft.class_id,
                resource_template_id=draft.template_id,
                is_public=draft.is_public,
                title=self._title_of(values),
            )
        )
        primary_key = result.inserted_primary_key
        if primary_key is None:
            raise WriteError(f"No id returned for the new {resource_type.label}")
        resource_id = int(primary_key[0])
        if values:
            self.session.execute(
                insert(value_table), [_value_row(resource_id, value) for value in values]
            )
        return resource_id

    def _next_media_position(self, item_id: int | None) -> int:
        if item_id is None:
            return 1
        stmt = select(func.max(media_table.c.position)).where(media_table.c.item_id == item_id)
        current = self.session.execute(stmt).scalar()
        return int(current or 0) + 1

    def _title_of(self, values: Sequence[PropertyValue]) -> str | None:
        title_id = self._title_property()
        if title_id is None:
            return None
        for value in values:
            if value.property_id == title_id and isinstance(value, LiteralValue):
                return value.value
        return None

    def _title_property(self) -> int | None:
        if not self._title_property_loaded:
            prefix, local_name = TITLE_TERM
            stmt = (
                select(property_table.c.id)
                .join(vocabulary_table, vocabulary_table.c.id == property_table.c.vocabulary_id)
                .where(vocabulary_table.c.prefix == prefix)
                .where(property_table.c.local_name == local_name)
            )
            self._title_property_id = self.session.execute(stmt).scalar()
            self._title_property_loaded = True
        return self._title_property_id


def _value_row(resource_id: int, value: PropertyValue) -> dict[str, Any]:
    row: dict[str, Any] = {
        "resource_id": resource_id,
        "property_id": value.property_id,
        "type": value.datatype,
        "lang": None,
        "value": None,
        "uri": None,
        "value_resource_id": None,
        "is_public": value.is_public,
    }
    if isinstance(value, LiteralValue):
        row["value"] = value.value
        row["lang"] = value.language
    elif isinstance(value, UriValue):
        row["uri"] = value.uri
        row["value"] = value.label
    elif isinstance(value, ResourceValue):
        row["value_resource_id"] = value.resource_id
    return row
