# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from familygraph.api.deps import get_graph_store
from familygraph.auth.dependencies import get_viewer
from familygraph.auth.viewer import ViewerContext
from familygraph.services.graph_store import GraphStore
from familygraph.services.projection import project_graph

router = APIRouter(tags=["graph"])


@router.get("/graph")
async def get_graph(
    viewer: ViewerContext = Depends(get_viewer),
    store: GraphStore = Depends(get_graph_store),
) -> dict[str, list[dict[str, Any]]]:
    """The person graph as the caller is allowed to see it."""
    graph = await store.fetch_graph()
    return project_graph(graph, viewer)
