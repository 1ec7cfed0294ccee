# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from familygraph.api.deps import get_snapshot_manager
from familygraph.auth.dependencies import require_admin
from familygraph.auth.viewer import Admin
from familygraph.schemas.snapshot import (
    RestoreRequest,
    RestoreResponse,
    SnapshotCreate,
    SnapshotCreated,
    SnapshotSummary,
)
from familygraph.services.snapshots import SnapshotManager

router = APIRouter(prefix="/snapshots", tags=["snapshots"])


@router.post("", response_model=SnapshotCreated, status_code=201)
async def create_snapshot(
    body: SnapshotCreate,
    _admin: Admin = Depends(require_admin),
    snapshots: SnapshotManager = Depends(get_snapshot_manager),
) -> SnapshotCreated:
    created = await snapshots.create(body.message, body.author)
    return SnapshotCreated(message="Snapshot created", **created)


@router.get("", response_model=list[SnapshotSummary])
async def list_snapshots(
    _admin: Admin = Depends(require_admin),
    snapshots: SnapshotManager = Depends(get_snapshot_manager),
) -> list[SnapshotSummary]:
    return [SnapshotSummary.model_validate(s) for s in snapshots.list_all()]


@router.get("/{snapshot_id}")
async def get_snapshot(
    snapshot_id: str,
    _admin: Admin = Depends(require_admin),
    snapshots: SnapshotManager = Depends(get_snapshot_manager),
) -> dict[str, Any]:
    """Full snapshot content, as stored on disk."""
    return snapshots.get(snapshot_id)


@router.post("/restore/{snapshot_id}", response_model=RestoreResponse)
async def restore_snapshot(
    snapshot_id: str,
    body: RestoreRequest,
    _admin: Admin = Depends(require_admin),
    snapshots: SnapshotManager = Depends(get_snapshot_manager),
) -> RestoreResponse:
    result = await snapshots.restore(snapshot_id, body.author)
    await snapshots.store.session.commit()
    return RestoreResponse(
        message="Snapshot restored",
        nodes_restored=result["nodesRestored"],
        edges_restored=result["edgesRestored"],
        backup_created=result["backupCreated"],
        backup_id=result["backupId"],
    )
