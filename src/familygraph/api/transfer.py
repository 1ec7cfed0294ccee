# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from familygraph.api.deps import get_graph_transfer
from familygraph.auth.dependencies import require_admin
from familygraph.auth.viewer import Admin
from familygraph.schemas.transfer import ImportRequest, ImportResponse
from familygraph.services.transfer import GraphTransfer

router = APIRouter(tags=["transfer"])


@router.get("/export")
async def export_graph(
    _admin: Admin = Depends(require_admin),
    transfer: GraphTransfer = Depends(get_graph_transfer),
) -> dict[str, Any]:
    return await transfer.export()


@router.post("/import", response_model=ImportResponse)
async def import_graph(
    body: ImportRequest,
    _admin: Admin = Depends(require_admin),
    transfer: GraphTransfer = Depends(get_graph_transfer),
) -> ImportResponse:
    counts = await transfer.import_graph(body.nodes, body.edges)
    await transfer.store.session.commit()
    return ImportResponse(
        message="Import succeeded",
        nodes_count=counts["nodesCount"],
        edges_count=counts["edgesCount"],
    )
