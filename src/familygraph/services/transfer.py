# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Whole-graph export, import and clear."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from familygraph.errors import ValidationError
from familygraph.services.graph_store import GraphStore
from familygraph.services.ids import IdentifierGenerator
from familygraph.services.validation import (
    is_valid_identifier,
    normalize_origins,
    parse_coordinate,
    validate_relation_type,
)

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with a trailing ``Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def validate_payload(
    nodes: list[dict[str, Any]], edges: list[dict[str, Any]]
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Check a full-graph payload before anything is deleted.

    Returns normalised copies of ``nodes`` and ``edges``.
    """
    clean_nodes: list[dict[str, Any]] = []
    names: set[str] = set()
    for index, node in enumerate(nodes):
        name = node.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Every node needs a name", {"index": index})
        name = name.strip()
        if name in names:
            raise ValidationError(f"Duplicate node name '{name}'", {"index": index})
        names.add(name)
        clean_nodes.append(
            {
                "name": name,
                "nodeId": node.get("nodeId"),
                "origins": normalize_origins(node.get("origins")),
                "x": parse_coordinate(node.get("x"), "x"),
                "y": parse_coordinate(node.get("y"), "y"),
            }
        )

    clean_edges: list[dict[str, Any]] = []
    for index, edge in enumerate(edges):
        source, target = edge.get("source"), edge.get("target")
        if source not in names or target not in names:
            raise ValidationError(
                "Edge endpoints must be nodes of the payload",
                {"index": index, "source": source, "target": target},
            )
        clean_edges.append(
            {
                "source": source,
                "target": target,
                "type": validate_relation_type(edge.get("type")),
                "edgeId": edge.get("edgeId"),
            }
        )
    return clean_nodes, clean_edges


async def replace_graph(
    store: GraphStore,
    ids: IdentifierGenerator,
    nodes: list[dict[str, Any]],
    edges: list[dict[str, Any]],
) -> tuple[int, int]:
    """Clear the graph, then recreate ``nodes`` and ``edges`` one by one.

    Missing, malformed or duplicated ids are regenerated. The payload must
    already have gone through :func:`validate_payload`.
    """
    await store.clear()

    used_node_ids: set[str] = set()
    for node in nodes:
        node_id = node.get("nodeId")
        if not is_valid_identifier(node_id) or node_id in used_node_ids:
            node_id = await ids.generate_node_id(reserved=used_node_ids)
        used_node_ids.add(node_id)
        await store.add_person(
            node["name"], node_id, origins=node["origins"], x=node["x"], y=node["y"]
        )

    used_edge_ids: set[str] = set()
    for edge in edges:
        edge_id = edge.get("edgeId")
        if not is_valid_identifier(edge_id) or edge_id in used_edge_ids:
            edge_id = await ids.generate_edge_id(reserved=used_edge_ids)
        used_edge_ids.add(edge_id)
        await store.add_relation(edge["source"], edge["target"], edge["type"], edge_id)

    return len(nodes), len(edges)


class GraphTransfer:
    def __init__(self, store: GraphStore, ids: IdentifierGenerator | None = None) -> None:
        self.store = store
        self.ids = ids or IdentifierGenerator(store)

    async def export(self) -> dict[str, Any]:
        graph = await self.store.fetch_graph()
        return {
            "nodes": [p.to_dict() for p in graph.persons],
            "edges": [e.to_dict() for e in graph.edges],
            "exportDate": utc_timestamp(),
        }

    async def import_graph(
        self, nodes: list[dict[str, Any]], edges: list[dict[str, Any]]
    ) -> dict[str, int]:
        clean_nodes, clean_edges = validate_payload(nodes, edges)
        nodes_count, edges_count = await replace_graph(
            self.store, self.ids, clean_nodes, clean_edges
        )
        logger.info("Imported %d node(s) and %d edge(s)", nodes_count, edges_count)
        return {"nodesCount": nodes_count, "edgesCount": edges_count}

    async def clear(self) -> dict[str, int]:
        persons, relations = await self.store.clear()
        return {"nodesDeleted": persons, "edgesDeleted": relations}
