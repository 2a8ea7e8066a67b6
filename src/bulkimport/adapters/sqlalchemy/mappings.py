"""SQLAlchemy Core tables for the resource repository."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)

from bulkimport.domain.model import ResourceType


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Registry tables -------------------------------------------------------------

vocabulary_table = Table(
    "vocabulary",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True),
    Column("prefix", String(190), nullable=False, unique=True),
    Column("namespace_uri", String(190), nullable=False),
    Column("label", String, nullable=False),
)

property_table = Table(
    "property",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "vocabulary_id",
        Integer,
        ForeignKey("vocabulary.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("local_name", String(190), nullable=False),
    Column("label", String, nullable=False),
    UniqueConstraint("vocabulary_id", "local_name"),
)

resource_class_table = Table(
    "resource_class",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "vocabulary_id",
        Integer,
        ForeignKey("vocabulary.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("local_name", String(190), nullable=False),
    Column("label", String, nullable=False),
    UniqueConstraint("vocabulary_id", "local_name"),
)

resource_template_table = Table(
    "resource_template",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True),
    Column("label", String(190), nullable=False, unique=True),
)

user_table = Table(
    "user",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True),
    Column("email", String(190), nullable=False, unique=True),
    Column("name", String(190), nullable=False),
)

# Resource tables -------------------------------------------------------------

resource_table = Table(
    "resource",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True),
    Column("resource_type", Enum(ResourceType, native_enum=False), nullable=False),
    Column("owner_id", Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True),
    Column(
        "resource_class_id",
        Integer,
        ForeignKey("resource_class.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "resource_template_id",
        Integer,
        ForeignKey("resource_template.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("is_public", Boolean, nullable=False, default=True),
    Column("title", Text, nullable=True),
    Column("created", UTCDateTime(), nullable=False, default=_utcnow),
)

item_table = Table(
    "item",
    mapper_registry.metadata,
    Column("id", Integer, ForeignKey("resource.id", ondelete="CASCADE"), primary_key=True),
)

item_set_table = Table(
    "item_set",
    mapper_registry.metadata,
    Column("id", Integer, ForeignKey("resource.id", ondelete="CASCADE"), primary_key=True),
    Column("is_open", Boolean, nullable=False, default=False),
)

item_item_set_table = Table(
    "item_item_set",
    mapper_registry.metadata,
    Column("item_id", Integer, ForeignKey("item.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "item_set_id", Integer, ForeignKey("item_set.id", ondelete="CASCADE"), primary_key=True
    ),
)

media_table = Table(
    "media",
    mapper_registry.metadata,
    Column("id", Integer, ForeignKey("resource.id", ondelete="CASCADE"), primary_key=True),
    Column("item_id", Integer, ForeignKey("item.id", ondelete="CASCADE"), nullable=False),
    Column("ingester", String(190), nullable=False),
    Column("source", Text, nullable=False),
    Column("position", Integer, nullable=False, default=1),
    Index("ix_media_ingester_source", "ingester", "source"),
)

value_table = Table(
    "value",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "resource_id", Integer, ForeignKey("resource.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "property_id", Integer, ForeignKey("property.id", ondelete="CASCADE"), nullable=False
    ),
    Column("type", String(190), nullable=False),
    Column("lang", String(190), nullable=True),
    Column("value", Text, nullable=True),
    Column("uri", Text, nullable=True),
    Column(
        "value_resource_id",
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("is_public", Boolean, nullable=False, default=True),
    Index("ix_value_property_id_value", "property_id", "value"),
)

SPECIFIC_TABLES = {
    ResourceType.ITEMS: item_table,
    ResourceType.ITEM_SETS: item_set_table,
    ResourceType.MEDIA: media_table,
}
