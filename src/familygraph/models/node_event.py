# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, SmallInteger, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from familygraph.models.base import Base, UUIDMixin


class NodeEvent(UUIDMixin, Base):
    """Audit trail entry for a person creation, update or deletion."""

    __tablename__ = "node_events"

    node_id: Mapped[str] = mapped_column(String(6), nullable=False)
    action: Mapped[str] = mapped_column(String(10), nullable=False)
    created_by: Mapped[str | None] = mapped_column(Text, default=None)
    created_with_visibility_level: Mapped[int | None] = mapped_column(
        SmallInteger, default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    __table_args__ = (Index("idx_node_events_node", "node_id"),)
