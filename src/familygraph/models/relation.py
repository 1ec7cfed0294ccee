# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from familygraph.models.base import Base, TimestampMixin, UUIDMixin
from familygraph.models.person import Person


class Relation(UUIDMixin, TimestampMixin, Base):
    """A directed, typed edge between two persons."""

    __tablename__ = "relations"

    source_id: Mapped[UUID] = mapped_column(
        ForeignKey("persons.id", ondelete="CASCADE"),
        nullable=False,
    )
    target_id: Mapped[UUID] = mapped_column(
        ForeignKey("persons.id", ondelete="CASCADE"),
        nullable=False,
    )
    relation_type: Mapped[str] = mapped_column(String, nullable=False)
    edge_id: Mapped[str | None] = mapped_column(String(6), unique=True, default=None)

    # Relationships
    source: Mapped[Person] = relationship(foreign_keys="[Relation.source_id]", lazy="joined")
    target: Mapped[Person] = relationship(foreign_keys="[Relation.target_id]", lazy="joined")

    __table_args__ = (
        Index("idx_relations_source", "source_id"),
        Index("idx_relations_target", "target_id"),
        Index("idx_relations_type", "relation_type"),
    )
