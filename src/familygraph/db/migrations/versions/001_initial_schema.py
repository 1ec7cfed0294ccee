# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Initial schema: persons, relations, proposals, users, node_events.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None

_JSON = sa.JSON().with_variant(JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "persons",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False, unique=True),
        sa.Column("node_id", sa.String(6), nullable=True, unique=True),
        sa.Column("origins", _JSON, nullable=False),
        sa.Column("x", sa.Float(), nullable=False),
        sa.Column("y", sa.Float(), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_persons_node_id", "persons", ["node_id"])

    op.create_table(
        "relations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "source_id",
            sa.Uuid(),
            sa.ForeignKey("persons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "target_id",
            sa.Uuid(),
            sa.ForeignKey("persons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("relation_type", sa.String(), nullable=False),
        sa.Column("edge_id", sa.String(6), nullable=True, unique=True),
        *_timestamps(),
    )
    op.create_index("idx_relations_source", "relations", ["source_id"])
    op.create_index("idx_relations_target", "relations", ["target_id"])
    op.create_index("idx_relations_type", "relations", ["relation_type"])

    op.create_table(
        "proposals",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("author_name", sa.Text(), nullable=True),
        sa.Column("author_email", sa.Text(), nullable=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("data", _JSON, nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.Text(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_proposals_status",
        ),
        sa.CheckConstraint(
            "type IN ('add_node', 'add_relation', 'modify_node', 'delete_node', 'delete_relation')",
            name="ck_proposals_type",
        ),
    )
    op.create_index("idx_proposals_status", "proposals", ["status"])
    op.create_index("idx_proposals_author_email", "proposals", ["author_email"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("person_node_id", sa.String(6), nullable=False, unique=True),
        sa.Column("visibility_level", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.CheckConstraint("visibility_level >= 1", name="ck_users_visibility_level"),
    )

    op.create_table(
        "node_events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("node_id", sa.String(6), nullable=False),
        sa.Column("action", sa.String(10), nullable=False),
        sa.Column("created_by", sa.Text(), nullable=True),
        sa.Column("created_with_visibility_level", sa.SmallInteger(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
    )
    op.create_index("idx_node_events_node", "node_events", ["node_id"])


def downgrade() -> None:
    op.drop_index("idx_node_events_node", table_name="node_events")
    op.drop_table("node_events")
    op.drop_table("users")
    op.drop_index("idx_proposals_author_email", table_name="proposals")
    op.drop_index("idx_proposals_status", table_name="proposals")
    op.drop_table("proposals")
    op.drop_index("idx_relations_type", table_name="relations")
    op.drop_index("idx_relations_target", table_name="relations")
    op.drop_index("idx_relations_source", table_name="relations")
    op.drop_table("relations")
    op.drop_index("idx_persons_node_id", table_name="persons")
    op.drop_table("persons")
