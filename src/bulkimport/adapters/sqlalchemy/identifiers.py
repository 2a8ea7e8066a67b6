"""Identifier store backed by the resource tables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from bulkimport.adapters.sqlalchemy.mappings import media_table, resource_table, value_table
from bulkimport.common.errors import ResolutionError
from bulkimport.domain.ports import MatchRow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

    from bulkimport.domain.model import ResourceType


class SqlAlchemyIdentifierStore:
    """Case-insensitive identifier lookups, ordered by ``(resource_id, row_id)``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_existing_ids(
        self,
        ids: Sequence[int],
        resource_type: ResourceType | None = None,
    ) -> list[int]:
        if not ids:
            return []
        stmt = select(resource_table.c.id).where(resource_table.c.id.in_(list(ids)))
        if resource_type is not None:
            stmt = stmt.where(resource_table.c.resource_type == resource_type)
        stmt = stmt.order_by(resource_table.c.id)
        return [int(row_id) for row_id in self._scalars(stmt)]

    def find_property_values(
        self,
        values: Sequence[str],
        property_id: int,
        resource_type: ResourceType | None = None,
    ) -> list[MatchRow]:
        if not values:
            return []
        stmt = (
            select(value_table.c.value, value_table.c.resource_id, value_table.c.id)
            .join(resource_table, resource_table.c.id == value_table.c.resource_id)
            .where(value_table.c.property_id == property_id)
            .where(func.lower(value_table.c.value).in_(_folded(values)))
        )
        if resource_type is not None:
            stmt = stmt.where(resource_table.c.resource_type == resource_type)
        stmt = stmt.order_by(value_table.c.resource_id, value_table.c.id)
        return self._match_rows(stmt)

    def find_media_sources(
        self,
        sources: Sequence[str],
        ingester: str,
        item_id: int | None = None,
    ) -> list[MatchRow]:
        if not sources:
            return []
        stmt = (
            select(media_table.c.source, media_table.c.id, media_table.c.id)
            .where(media_table.c.ingester == ingester)
            .where(func.lower(media_table.c.source).in_(_folded(sources)))
        )
        if item_id is not None:
            stmt = stmt.where(media_table.c.item_id == item_id)
        stmt = stmt.order_by(media_table.c.id)
        return self._match_rows(stmt)

    def _scalars(self, stmt: Select[tuple[int]]) -> list[int]:
        try:
            return list(self.session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            raise ResolutionError(f"Identifier lookup failed: {exc}") from exc

    def _match_rows(self, stmt: Select[tuple[str, int, int]]) -> list[MatchRow]:
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise ResolutionError(f"Identifier lookup failed: {exc}") from exc
        return [
            MatchRow(identifier=str(identifier), resource_id=int(resource_id), row_id=int(row_id))
            for identifier, resource_id, row_id in rows
        ]


def _folded(values: Sequence[str]) -> list[str]:
    return sorted({value.lower() for value in values})
