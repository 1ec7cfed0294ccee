# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from familygraph.models.proposal import Proposal
from familygraph.schemas.common import CamelModel


class ProposalCreate(CamelModel):
    proposal_type: str = Field(alias="type")
    data: dict[str, Any] = Field(default_factory=dict)
    author_name: str | None = Field(None, max_length=200)


class ReviewRequest(CamelModel):
    # Presence is checked by the engine so the error message names the field.
    reviewed_by: str | None = None
    comment: str | None = Field(None, max_length=10_000)


class ProposalResponse(CamelModel):
    id: UUID
    author_name: str | None
    author_email: str | None
    proposal_type: str = Field(alias="type")
    data: dict[str, Any]
    status: str
    created_at: datetime
    reviewed_at: datetime | None
    reviewed_by: str | None
    comment: str | None

    @classmethod
    def from_model(cls, proposal: Proposal) -> ProposalResponse:
        return cls(
            id=proposal.id,
            author_name=proposal.author_name,
            author_email=proposal.author_email,
            proposal_type=proposal.proposal_type,
            data=proposal.data,
            status=proposal.status,
            created_at=proposal.created_at,
            reviewed_at=proposal.reviewed_at,
            reviewed_by=proposal.reviewed_by,
            comment=proposal.comment,
        )


class ProposalCreated(CamelModel):
    id: UUID
    message: str


class ProposalReviewed(CamelModel):
    message: str
    proposal: ProposalResponse
    snapshot_created: bool = False
    snapshot_id: str | None = None


class ProposalStats(CamelModel):
    pending: int
    approved: int
    rejected: int
    total: int
