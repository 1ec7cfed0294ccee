# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Person graph access on top of the relational store.

``GraphStore`` is the only component that knows persons and relations live in
SQL tables. Everything above it talks in names, node ids and edge ids.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.errors import ConflictError, NotFound
from familygraph.models.person import Person
from familygraph.models.relation import Relation
from familygraph.repositories.node_event_repository import NodeEventRepository
from familygraph.repositories.person_repository import PersonRepository
from familygraph.repositories.relation_repository import RelationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersonRecord:
    name: str
    node_id: str | None
    origins: list[str] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "name": self.name,
            "origins": list(self.origins),
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True)
class EdgeRecord:
    source: str
    target: str
    type: str
    edge_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "edgeId": self.edge_id,
        }


@dataclass(frozen=True)
class RawGraph:
    """Every person and every directed edge, unredacted."""

    persons: list[PersonRecord]
    edges: list[EdgeRecord]


def person_record(person: Person) -> PersonRecord:
    return PersonRecord(
        name=person.name,
        node_id=person.node_id,
        origins=list(person.origins or []),
        x=person.x,
        y=person.y,
    )


class GraphStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.persons = PersonRepository(session)
        self.relations = RelationRepository(session)
        self.events = NodeEventRepository(session)

    async def fetch_graph(self) -> RawGraph:
        persons = await self.persons.list_ordered()
        relations = await self.relations.list_ordered()
        return RawGraph(
            persons=[person_record(p) for p in persons],
            edges=[
                EdgeRecord(
                    source=r.source.name,
                    target=r.target.name,
                    type=r.relation_type,
                    edge_id=r.edge_id,
                )
                for r in relations
            ],
        )

    async def get_person(self, name: str) -> Person:
        person = await self.persons.get_by_name(name)
        if person is None:
            raise NotFound(f"Person '{name}' not found")
        return person

    async def add_person(
        self,
        name: str,
        node_id: str | None,
        origins: list[str] | None = None,
        x: float = 0.0,
        y: float = 0.0,
    ) -> Person:
        if await self.persons.get_by_name(name) is not None:
            raise ConflictError(f"Person '{name}' already exists")
        person = Person(name=name, node_id=node_id, origins=origins or [], x=x, y=y)
        return await self.persons.create(person)

    async def update_person(
        self,
        name: str,
        *,
        new_name: str | None = None,
        origins: list[str] | None = None,
    ) -> Person:
        """Rename and/or retag a person. ``None`` leaves a field unchanged."""
        person = await self.get_person(name)
        if new_name is not None and new_name != person.name:
            if await self.persons.get_by_name(new_name) is not None:
                raise ConflictError(f"Person '{new_name}' already exists")
            person.name = new_name
        if origins is not None:
            person.origins = origins
        await self.session.flush()
        return person

    async def move_person(self, name: str, x: float, y: float) -> Person:
        person = await self.get_person(name)
        person.x = x
        person.y = y
        await self.session.flush()
        return person

    async def delete_person(self, name: str) -> Person:
        """Detach-delete: the person and every edge touching it."""
        person = await self.get_person(name)
        removed = await self.relations.delete_for_person(person.id)
        await self.persons.delete(person)
        logger.debug("Deleted person %s and %d relation(s)", name, removed)
        return person

    async def add_relation(
        self, source: str, target: str, relation_type: str, edge_id: str | None
    ) -> Relation:
        source_person = await self.get_person(source)
        target_person = await self.get_person(target)
        relation = Relation(
            source_id=source_person.id,
            target_id=target_person.id,
            relation_type=relation_type,
            edge_id=edge_id,
        )
        return await self.relations.create(relation)

    async def delete_relation(self, source: str, target: str, relation_type: str) -> int:
        source_person = await self.get_person(source)
        target_person = await self.get_person(target)
        matches = await self.relations.find(source_person.id, target_person.id, relation_type)
        if not matches:
            raise NotFound(f"No {relation_type} relation from '{source}' to '{target}'")
        for relation in matches:
            await self.session.delete(relation)
        await self.session.flush()
        return len(matches)

    async def clear(self) -> tuple[int, int]:
        """Remove every person and relation. Proposals and users are kept."""
        relations = await self.relations.delete_all()
        persons = await self.persons.delete_all()
        logger.info("Cleared graph: %d person(s), %d relation(s)", persons, relations)
        return persons, relations
