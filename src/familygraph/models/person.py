# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from sqlalchemy import Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from familygraph.models.base import Base, JSONType, TimestampMixin, UUIDMixin


class Person(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "persons"

    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    # Nullable only for legacy rows; the startup backfill assigns one.
    node_id: Mapped[str | None] = mapped_column(String(6), unique=True, default=None)
    origins: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (Index("idx_persons_node_id", "node_id"),)
