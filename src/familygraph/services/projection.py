# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Viewer-scoped projection of the person graph.

Given the full graph and a :data:`~familygraph.auth.viewer.ViewerContext`,
:func:`project_graph` returns the ``{"nodes": [...], "edges": [...]}``
payload served by ``GET /graph``:

* the administrator sees everything, keyed by person name;
* anonymous callers see pseudonymous nodes (``nodeId`` plus coordinates)
  and edges whose type is always ``CONNECTION``;
* a logged-in member sees their own name, and from visibility level 3 the
  names of their direct neighbours. Edge types are disclosed from level 2
  for edges touching the member, and from level 3 for edges whose two
  endpoints are both within two hops of the member.

Persons that have no valid ``nodeId`` yet are only visible to the
administrator, along with every edge touching them.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from familygraph.auth.viewer import Admin, Authenticated, ViewerContext
from familygraph.services.graph_store import EdgeRecord, PersonRecord, RawGraph
from familygraph.services.validation import is_valid_identifier

CONNECTION = "CONNECTION"

# Visibility level thresholds.
LEVEL_EDGE_TYPES = 2
LEVEL_NEIGHBOURHOOD = 3


@dataclass(frozen=True)
class _PseudonymousEdge:
    source: str
    target: str
    record: EdgeRecord

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


def project_graph(graph: RawGraph, viewer: ViewerContext) -> dict[str, list[dict[str, Any]]]:
    """Return the part of ``graph`` that ``viewer`` is allowed to see."""
    match viewer:
        case Admin():
            return _admin_view(graph)
        case Authenticated(node_id=node_id, visibility_level=level):
            persons = _pseudonymous_persons(graph)
            if node_id not in persons:
                # The member's own person is gone (or not migrated yet).
                return _anonymous_view(graph)
            return _member_view(graph, node_id, level)
        case _:
            return _anonymous_view(graph)


def _admin_view(graph: RawGraph) -> dict[str, list[dict[str, Any]]]:
    nodes = [{"id": p.name, **p.to_dict()} for p in graph.persons]
    edges = [e.to_dict() for e in graph.edges]
    return {"nodes": nodes, "edges": edges}


def _pseudonymous_persons(graph: RawGraph) -> dict[str, PersonRecord]:
    """Persons keyed by nodeId, skipping those without a valid one."""
    return {p.node_id: p for p in graph.persons if is_valid_identifier(p.node_id)}  # type: ignore[misc]


def _pseudonymous_edges(graph: RawGraph) -> list[_PseudonymousEdge]:
    ids_by_name = {
        p.name: p.node_id for p in graph.persons if is_valid_identifier(p.node_id)
    }
    edges = []
    for edge in graph.edges:
        source = ids_by_name.get(edge.source)
        target = ids_by_name.get(edge.target)
        if source is None or target is None:
            continue
        edges.append(_PseudonymousEdge(source=source, target=target, record=edge))
    return edges


def _bare_node(node_id: str, person: PersonRecord) -> dict[str, Any]:
    return {"id": node_id, "x": person.x, "y": person.y}


def _named_node(node_id: str, person: PersonRecord) -> dict[str, Any]:
    return {
        "id": node_id,
        "nodeId": node_id,
        "name": person.name,
        "origins": list(person.origins),
        "x": person.x,
        "y": person.y,
    }


def _edge(edge: _PseudonymousEdge, reveal_type: bool) -> dict[str, Any]:
    return {
        "source": edge.source,
        "target": edge.target,
        "type": edge.record.type if reveal_type else CONNECTION,
        "edgeId": edge.record.edge_id,
    }


def _anonymous_view(graph: RawGraph) -> dict[str, list[dict[str, Any]]]:
    persons = _pseudonymous_persons(graph)
    return {
        "nodes": [_bare_node(node_id, p) for node_id, p in persons.items()],
        "edges": [_edge(e, reveal_type=False) for e in _pseudonymous_edges(graph)],
    }


def _adjacency(edges: list[_PseudonymousEdge]) -> dict[str, set[str]]:
    """Undirected neighbour sets; edge direction does not matter here."""
    adjacency: dict[str, set[str]] = defaultdict(set)
    for edge in edges:
        adjacency[edge.source].add(edge.target)
        adjacency[edge.target].add(edge.source)
    return adjacency


def _visible_sets(
    edges: list[_PseudonymousEdge], viewer_id: str, level: int
) -> tuple[set[str], set[str]]:
    """Compute ``(name_ids, two_hop_ids)`` for a member.

    ``name_ids`` is the set of nodes whose name and origins are disclosed:
    the viewer alone below level 3, the viewer and its direct neighbours from
    level 3. ``two_hop_ids`` is only populated from level 3 and is used
    exclusively for edge-type disclosure, never to reveal a name.
    """
    adjacency = _adjacency(edges)
    neighbours = adjacency.get(viewer_id, set()) - {viewer_id}

    if level < LEVEL_NEIGHBOURHOOD:
        return {viewer_id}, set()

    name_ids = {viewer_id} | neighbours
    two_hop_ids = set(name_ids)
    for neighbour in neighbours:
        two_hop_ids |= adjacency.get(neighbour, set())
    return name_ids, two_hop_ids


def _member_view(
    graph: RawGraph, viewer_id: str, level: int
) -> dict[str, list[dict[str, Any]]]:
    persons = _pseudonymous_persons(graph)
    edges = _pseudonymous_edges(graph)
    name_ids, two_hop_ids = _visible_sets(edges, viewer_id, level)

    nodes = [
        _named_node(node_id, p) if node_id in name_ids else _bare_node(node_id, p)
        for node_id, p in persons.items()
    ]

    def reveal(edge: _PseudonymousEdge) -> bool:
        if level < LEVEL_EDGE_TYPES:
            return False
        if edge.touches(viewer_id):
            return True
        return (
            level >= LEVEL_NEIGHBOURHOOD
            and edge.source in two_hop_ids
            and edge.target in two_hop_ids
        )

    return {"nodes": nodes, "edges": [_edge(e, reveal(e)) for e in edges]}
