# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Service construction for request handlers."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.config import get_settings
from familygraph.db.session import get_db
from familygraph.services.graph_store import GraphStore
from familygraph.services.ids import IdentifierGenerator
from familygraph.services.proposals import ProposalEngine
from familygraph.services.snapshots import SnapshotManager
from familygraph.services.transfer import GraphTransfer


def get_graph_store(db: AsyncSession = Depends(get_db)) -> GraphStore:
    return GraphStore(db)


def get_identifier_generator(store: GraphStore = Depends(get_graph_store)) -> IdentifierGenerator:
    return IdentifierGenerator(store)


def get_snapshot_manager(
    store: GraphStore = Depends(get_graph_store),
    ids: IdentifierGenerator = Depends(get_identifier_generator),
) -> SnapshotManager:
    return SnapshotManager(store, get_settings().snapshots_dir, ids)


def get_proposal_engine(
    store: GraphStore = Depends(get_graph_store),
    snapshots: SnapshotManager = Depends(get_snapshot_manager),
    ids: IdentifierGenerator = Depends(get_identifier_generator),
) -> ProposalEngine:
    return ProposalEngine(store, snapshots, ids)


def get_graph_transfer(
    store: GraphStore = Depends(get_graph_store),
    ids: IdentifierGenerator = Depends(get_identifier_generator),
) -> GraphTransfer:
    return GraphTransfer(store, ids)
