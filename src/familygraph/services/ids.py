# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Short numeric identifiers for persons (``nodeId``) and edges (``edgeId``).

Identifiers are six digit strings drawn at random and probed against the
store. Node and edge identifiers live in separate namespaces.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Awaitable, Callable

from familygraph.errors import IdentifierSpaceExhausted
from familygraph.services.graph_store import GraphStore
from familygraph.services.validation import is_valid_identifier

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 50
ID_MIN = 100_000
ID_MAX = 999_999


class IdentifierGenerator:
    def __init__(self, store: GraphStore, rng: random.Random | None = None) -> None:
        self.store = store
        self.rng = rng or random.SystemRandom()

    def _candidate(self) -> str:
        return str(self.rng.randint(ID_MIN, ID_MAX))

    async def _generate(
        self,
        exists: Callable[[str], Awaitable[bool]],
        kind: str,
        reserved: set[str] | None = None,
    ) -> str:
        for _ in range(MAX_ATTEMPTS):
            candidate = self._candidate()
            if reserved is not None and candidate in reserved:
                continue
            if not await exists(candidate):
                return candidate
        logger.error("Could not allocate a unique %s after %d attempts", kind, MAX_ATTEMPTS)
        raise IdentifierSpaceExhausted(
            f"Unable to generate a unique {kind}",
            {"attempts": MAX_ATTEMPTS},
        )

    async def generate_node_id(self, reserved: set[str] | None = None) -> str:
        """Return a six digit id not used by any person (nor in ``reserved``)."""
        return await self._generate(self.store.persons.node_id_exists, "nodeId", reserved)

    async def generate_edge_id(self, reserved: set[str] | None = None) -> str:
        """Return a six digit id not used by any relation (nor in ``reserved``)."""
        return await self._generate(self.store.relations.edge_id_exists, "edgeId", reserved)

    async def migrate_missing_ids(self) -> tuple[int, int]:
        """Backfill persons and relations whose id is missing or malformed.

        Safe to run repeatedly: rows that already carry a valid id are not
        touched. Returns ``(nodes_updated, edges_updated)``.
        """
        nodes_updated = 0
        for person in await self.store.persons.list_ordered():
            if is_valid_identifier(person.node_id):
                continue
            person.node_id = await self.generate_node_id()
            await self.store.session.flush()
            nodes_updated += 1

        edges_updated = 0
        for relation in await self.store.relations.list_ordered():
            if is_valid_identifier(relation.edge_id):
                continue
            relation.edge_id = await self.generate_edge_id()
            await self.store.session.flush()
            edges_updated += 1

        if nodes_updated or edges_updated:
            logger.info(
                "Backfilled %d nodeId(s) and %d edgeId(s)", nodes_updated, edges_updated
            )
        return nodes_updated, edges_updated
