"""Initial resource repository schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

from bulkimport.adapters.sqlalchemy.mappings import UTCDateTime

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "vocabulary",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("prefix", sa.String(190), nullable=False),
        sa.Column("namespace_uri", sa.String(190), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.UniqueConstraint("prefix", name="uq_vocabulary_prefix"),
    )
    op.create_table(
        "property",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "vocabulary_id",
            sa.Integer(),
            sa.ForeignKey("vocabulary.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("local_name", sa.String(190), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.UniqueConstraint("vocabulary_id", "local_name", name="uq_property_vocabulary_id"),
    )
    op.create_table(
        "resource_class",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "vocabulary_id",
            sa.Integer(),
            sa.ForeignKey("vocabulary.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("local_name", sa.String(190), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.UniqueConstraint(
            "vocabulary_id", "local_name", name="uq_resource_class_vocabulary_id"
        ),
    )
    op.create_table(
        "resource_template",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("label", sa.String(190), nullable=False),
        sa.UniqueConstraint("label", name="uq_resource_template_label"),
    )
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(190), nullable=False),
        sa.Column("name", sa.String(190), nullable=False),
        sa.UniqueConstraint("email", name="uq_user_email"),
    )
    op.create_table(
        "resource",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "resource_type",
            sa.Enum("ITEMS", "ITEM_SETS", "MEDIA", name="resourcetype", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "owner_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column(
            "resource_class_id",
            sa.Integer(),
            sa.ForeignKey("resource_class.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "resource_template_id",
            sa.Integer(),
            sa.ForeignKey("resource_template.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("created", UTCDateTime(), nullable=False),
    )
    op.create_table(
        "item",
        sa.Column(
            "id", sa.Integer(), sa.ForeignKey("resource.id", ondelete="CASCADE"), primary_key=True
        ),
    )
    op.create_table(
        "item_set",
        sa.Column(
            "id", sa.Integer(), sa.ForeignKey("resource.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column("is_open", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "item_item_set",
        sa.Column(
            "item_id", sa.Integer(), sa.ForeignKey("item.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "item_set_id",
            sa.Integer(),
            sa.ForeignKey("item_set.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_table(
        "media",
        sa.Column(
            "id", sa.Integer(), sa.ForeignKey("resource.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "item_id", sa.Integer(), sa.ForeignKey("item.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("ingester", sa.String(190), nullable=False),
        sa.Column("source", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_media_ingester_source", "media", ["ingester", "source"])
    op.create_table(
        "value",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "resource_id",
            sa.Integer(),
            sa.ForeignKey("resource.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "property_id",
            sa.Integer(),
            sa.ForeignKey("property.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(190), nullable=False),
        sa.Column("lang", sa.String(190), nullable=True),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("uri", sa.Text(), nullable=True),
        sa.Column(
            "value_resource_id",
            sa.Integer(),
            sa.ForeignKey("resource.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("is_public", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_value_property_id_value", "value", ["property_id", "value"])


def downgrade() -> None:
    op.drop_index("ix_value_property_id_value", table_name="value")
    op.drop_table("value")
    op.drop_index("ix_media_ingester_source", table_name="media")
    op.drop_table("media")
    op.drop_table("item_item_set")
    op.drop_table("item_set")
    op.drop_table("item")
    op.drop_table("resource")
    op.drop_table("user")
    op.drop_table("resource_template")
    op.drop_table("resource_class")
    op.drop_table("property")
    op.drop_table("vocabulary")
