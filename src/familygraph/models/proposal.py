# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from familygraph.models.base import Base, JSONType, UUIDMixin

PROPOSAL_TYPES = (
    "add_node",
    "add_relation",
    "modify_node",
    "delete_node",
    "delete_relation",
)
PROPOSAL_STATUSES = ("pending", "approved", "rejected")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Proposal(UUIDMixin, Base):
    """A change request against the person graph, reviewed by the admin."""

    __tablename__ = "proposals"

    author_name: Mapped[str | None] = mapped_column(Text, default=None)
    author_email: Mapped[str | None] = mapped_column(Text, default=None)
    proposal_type: Mapped[str] = mapped_column("type", String, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    reviewed_by: Mapped[str | None] = mapped_column(Text, default=None)
    comment: Mapped[str | None] = mapped_column(Text, default=None)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_proposals_status",
        ),
        CheckConstraint(
            "type IN ('add_node', 'add_relation', 'modify_node', 'delete_node', 'delete_relation')",
            name="ck_proposals_type",
        ),
        Index("idx_proposals_status", "status"),
        Index("idx_proposals_author_email", "author_email"),
    )
