# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from familygraph.api.deps import get_proposal_engine
from familygraph.auth.dependencies import get_viewer, require_admin
from familygraph.auth.viewer import Admin, ViewerContext
from familygraph.schemas.proposal import (
    ProposalCreate,
    ProposalCreated,
    ProposalResponse,
    ProposalReviewed,
    ProposalStats,
    ReviewRequest,
)
from familygraph.services.proposals import ProposalEngine

router = APIRouter(prefix="/proposals", tags=["proposals"])


@router.post("", response_model=ProposalCreated, status_code=201)
async def submit_proposal(
    body: ProposalCreate,
    viewer: ViewerContext = Depends(get_viewer),
    engine: ProposalEngine = Depends(get_proposal_engine),
) -> ProposalCreated:
    proposal = await engine.submit(viewer, body.proposal_type, body.data, body.author_name)
    return ProposalCreated(id=proposal.id, message="Proposal created")


@router.get("", response_model=list[ProposalResponse])
async def list_proposals(
    status: str = Query("pending"),
    viewer: ViewerContext = Depends(get_viewer),
    engine: ProposalEngine = Depends(get_proposal_engine),
) -> list[ProposalResponse]:
    proposals = await engine.list_proposals(viewer, status)
    return [ProposalResponse.from_model(p) for p in proposals]


# Declared before "/{proposal_id}" so "stats" is not taken for an id.
@router.get("/stats", response_model=ProposalStats)
async def proposal_stats(
    viewer: ViewerContext = Depends(get_viewer),
    engine: ProposalEngine = Depends(get_proposal_engine),
) -> ProposalStats:
    return ProposalStats(**await engine.stats(viewer))


@router.get("/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(
    proposal_id: str,
    viewer: ViewerContext = Depends(get_viewer),
    engine: ProposalEngine = Depends(get_proposal_engine),
) -> ProposalResponse:
    return ProposalResponse.from_model(await engine.get(viewer, proposal_id))


@router.post("/{proposal_id}/approve", response_model=ProposalReviewed)
async def approve_proposal(
    proposal_id: str,
    body: ReviewRequest,
    _admin: Admin = Depends(require_admin),
    engine: ProposalEngine = Depends(get_proposal_engine),
) -> ProposalReviewed:
    proposal, snapshot = await engine.approve(proposal_id, body.reviewed_by, body.comment)
    return ProposalReviewed(
        message="Proposal approved and applied",
        proposal=ProposalResponse.from_model(proposal),
        snapshot_created=True,
        snapshot_id=snapshot["id"],
    )


@router.post("/{proposal_id}/reject", response_model=ProposalReviewed)
async def reject_proposal(
    proposal_id: str,
    body: ReviewRequest,
    _admin: Admin = Depends(require_admin),
    engine: ProposalEngine = Depends(get_proposal_engine),
) -> ProposalReviewed:
    proposal = await engine.reject(proposal_id, body.reviewed_by, body.comment)
    return ProposalReviewed(
        message="Proposal rejected",
        proposal=ProposalResponse.from_model(proposal),
    )
