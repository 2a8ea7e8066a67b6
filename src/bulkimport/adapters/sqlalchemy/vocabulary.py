"""Name lookups against the vocabulary, template, class and user tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from bulkimport.adapters.sqlalchemy.mappings import (
    property_table,
    resource_class_table,
    resource_template_table,
    user_table,
    vocabulary_table,
)
from bulkimport.common.errors import ResolutionError
from bulkimport.domain.model import normalize_datatype
from bulkimport.domain.ports import AutoMappedField
from bulkimport.domain.text import parse_field_header

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select, Table
    from sqlalchemy.orm import Session


class SqlAlchemyVocabulary:
    """``NameLookup`` over the registry tables.

    Property ids and terms are cached for the lifetime of the instance, which
    is one unit of work.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self._ids_by_term: dict[str, int | None] = {}
        self._terms_by_id: dict[int, str | None] = {}

    # Properties ---------------------------------------------------------------

    def find_property_id(self, term: str | int) -> int | None:
        if isinstance(term, int) and not isinstance(term, bool):
            return term if self.get_property_term(term) is not None else None
        value = str(term).strip()
        if not value:
            return None
        if value.isdecimal():
            return self.find_property_id(int(value))
        if value not in self._ids_by_term:
            self._ids_by_term[value] = self._lookup_property_id(value)
        return self._ids_by_term[value]

    def get_property_term(self, property_id: int) -> str | None:
        if property_id not in self._terms_by_id:
            stmt = (
                select(vocabulary_table.c.prefix, property_table.c.local_name)
                .join(vocabulary_table, vocabulary_table.c.id == property_table.c.vocabulary_id)
                .where(property_table.c.id == property_id)
            )
            try:
                row = self.session.execute(stmt).first()
            except SQLAlchemyError as exc:
                raise ResolutionError(f"Vocabulary lookup failed: {exc}") from exc
            self._terms_by_id[property_id] = f"{row.prefix}:{row.local_name}" if row else None
        return self._terms_by_id[property_id]

    def get_data_type(self, hint: str | None) -> str | None:
        return normalize_datatype(hint)

    def auto_detect(self, field_names: Sequence[str]) -> list[AutoMappedField]:
        detected: list[AutoMappedField] = []
        for field_name in field_names:
            name, language, datatype = parse_field_header(field_name)
            property_id = self.find_property_id(name) or self._property_id_by_label(name)
            term = self.get_property_term(property_id) if property_id is not None else None
            detected.append(
                AutoMappedField(
                    field=term or name or field_name,
                    datatype=datatype,
                    language=language,
                )
            )
        return detected

    # Other registries --------------------------------------------------------

    def find_resource_template_id(self, value: str) -> int | None:
        return self._id_or_label(resource_template_table, value)

    def find_resource_class_id(self, value: str) -> int | None:
        value = value.strip()
        prefix, _, local_name = value.partition(":")
        if local_name:
            stmt = (
                select(resource_class_table.c.id)
                .join(
                    vocabulary_table,
                    vocabulary_table.c.id == resource_class_table.c.vocabulary_id,
                )
                .where(vocabulary_table.c.prefix == prefix)
                .where(resource_class_table.c.local_name == local_name)
            )
            class_id = self._first_id(stmt)
            if class_id is not None:
                return class_id
        return self._id_or_label(resource_class_table, value)

    def find_user_id(self, value: str) -> int | None:
        value = value.strip()
        if not value:
            return None
        if value.isdecimal():
            return self._existing_id(user_table, int(value))
        column = user_table.c.email if "@" in value else user_table.c.name
        return self._first_id(
            select(user_table.c.id)
            .where(func.lower(column) == value.lower())
            .order_by(user_table.c.id)
        )

    # Helpers -----------------------------------------------------------------

    def _lookup_property_id(self, term: str) -> int | None:
        prefix, _, local_name = term.partition(":")
        if not local_name:
            return None
        stmt = (
            select(property_table.c.id)
            .join(vocabulary_table, vocabulary_table.c.id == property_table.c.vocabulary_id)
            .where(vocabulary_table.c.prefix == prefix)
            .where(property_table.c.local_name == local_name)
        )
        return self._first_id(stmt)

    def _property_id_by_label(self, label: str) -> int | None:
        if not label:
            return None
        return self._first_id(
            select(property_table.c.id)
            .where(func.lower(property_table.c.label) == label.lower())
            .order_by(property_table.c.id)
        )

    def _id_or_label(self, table: Table, value: str) -> int | None:
        value = value.strip()
        if not value:
            return None
        if value.isdecimal():
            return self._existing_id(table, int(value))
        return self._first_id(
            select(table.c.id)
            .where(func.lower(table.c.label) == value.lower())
            .order_by(table.c.id)
        )

    def _existing_id(self, table: Table, row_id: int) -> int | None:
        return self._first_id(select(table.c.id).where(table.c.id == row_id))

    def _first_id(self, stmt: Select[Any]) -> int | None:
        try:
            value = self.session.execute(stmt.limit(1)).scalar()
        except SQLAlchemyError as exc:
            raise ResolutionError(f"Vocabulary lookup failed: {exc}") from exc
        return int(value) if value is not None else None
