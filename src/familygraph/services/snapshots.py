# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""JSON file snapshots of the person graph.

Each snapshot is one ``snapshot-<timestamp>-<id>.json`` file holding the
persons and edges at creation time. Proposals are never part of a snapshot.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any
from uuid import uuid4

from familygraph.errors import NotFound, UpstreamUnavailable
from familygraph.services.graph_store import GraphStore
from familygraph.services.ids import IdentifierGenerator
from familygraph.services.transfer import replace_graph, utc_timestamp, validate_payload

logger = logging.getLogger(__name__)

_SNAPSHOT_ID = re.compile(r"[0-9a-f]{8}")


def _storage_failure(action: str, exc: OSError) -> UpstreamUnavailable:
    logger.exception("Snapshot storage failed while %s", action)
    return UpstreamUnavailable("Snapshot storage unavailable", str(exc))


class SnapshotManager:
    def __init__(
        self,
        store: GraphStore,
        directory: Path,
        ids: IdentifierGenerator | None = None,
    ) -> None:
        self.store = store
        self.directory = Path(directory)
        self.ids = ids or IdentifierGenerator(store)

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _files(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(self.directory.glob("snapshot-*.json"), reverse=True)

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise _storage_failure(f"reading {path.name}", exc) from exc

    def _find(self, snapshot_id: str) -> Path:
        if _SNAPSHOT_ID.fullmatch(snapshot_id):
            matches = list(self.directory.glob(f"snapshot-*-{snapshot_id}.json"))
            if matches:
                return matches[0]
        raise NotFound("Snapshot not found", {"id": snapshot_id})

    async def create(self, message: str, author: str) -> dict[str, str]:
        graph = await self.store.fetch_graph()
        snapshot_id = uuid4().hex[:8]
        timestamp = utc_timestamp()
        snapshot = {
            "id": snapshot_id,
            "timestamp": timestamp,
            "message": message,
            "author": author,
            "nodes": [p.to_dict() for p in graph.persons],
            "edges": [e.to_dict() for e in graph.edges],
        }

        filename = f"snapshot-{timestamp.replace(':', '-')}-{snapshot_id}.json"
        try:
            self.ensure_directory()
            (self.directory / filename).write_text(
                json.dumps(snapshot, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as exc:
            raise _storage_failure(f"writing {filename}", exc) from exc
        logger.info(
            "Created snapshot %s (%d nodes, %d edges) by %s: %s",
            snapshot_id,
            len(graph.persons),
            len(graph.edges),
            author,
            message,
        )
        return {"id": snapshot_id, "filename": filename, "timestamp": timestamp}

    def list_all(self) -> list[dict[str, Any]]:
        """Snapshot summaries, newest first."""
        summaries = []
        for path in self._files():
            content = self._read(path)
            summaries.append(
                {
                    "id": content["id"],
                    "filename": path.name,
                    "timestamp": content["timestamp"],
                    "message": content["message"],
                    "author": content["author"],
                    "nodesCount": len(content["nodes"]),
                    "edgesCount": len(content["edges"]),
                }
            )
        return summaries

    def get(self, snapshot_id: str) -> dict[str, Any]:
        return self._read(self._find(snapshot_id))

    async def restore(self, snapshot_id: str, author: str) -> dict[str, Any]:
        """Replace the graph with a snapshot, after backing up the current one."""
        snapshot = self.get(snapshot_id)
        nodes, edges = validate_payload(snapshot["nodes"], snapshot["edges"])

        backup = await self.create(
            f"Automatic backup before restoring snapshot {snapshot_id}", author
        )
        nodes_restored, edges_restored = await replace_graph(self.store, self.ids, nodes, edges)
        logger.info(
            "Restored snapshot %s by %s (%d nodes, %d edges), backup %s",
            snapshot_id,
            author,
            nodes_restored,
            edges_restored,
            backup["id"],
        )
        return {
            "nodesRestored": nodes_restored,
            "edgesRestored": edges_restored,
            "backupCreated": True,
            "backupId": backup["id"],
        }
