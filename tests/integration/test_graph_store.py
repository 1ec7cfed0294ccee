# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.errors import ConflictError, NotFound
from familygraph.models.person import Person
from familygraph.models.relation import Relation
from familygraph.services.graph_store import EdgeRecord, GraphStore
from familygraph.services.ids import IdentifierGenerator
from tests.conftest import make_person, seed_graph


class TestPersons:
    async def test_add_then_get_by_name(self, store: GraphStore, ids: IdentifierGenerator) -> None:
        node_id = await ids.generate_node_id()
        await store.add_person("Jean DUPONT", node_id, origins=["Paris"], x=10, y=20)

        person = await store.get_person("Jean DUPONT")

        assert person.node_id == node_id
        assert len(person.node_id) == 6 and person.node_id.isdigit()
        assert person.origins == ["Paris"]
        assert (person.x, person.y) == (10, 20)

    async def test_duplicate_name_conflicts(self, store: GraphStore) -> None:
        await store.add_person("Jean DUPONT", "100001")
        with pytest.raises(ConflictError):
            await store.add_person("Jean DUPONT", "100002")

    async def test_unknown_person(self, store: GraphStore) -> None:
        with pytest.raises(NotFound):
            await store.get_person("Nobody HERE")

    async def test_rename_and_retag(self, store: GraphStore) -> None:
        await store.add_person("Jean DUPONT", "100001", origins=["Paris"])

        person = await store.update_person(
            "Jean DUPONT", new_name="Jean DURAND", origins=["Lyon"]
        )

        assert person.name == "Jean DURAND"
        assert person.origins == ["Lyon"]
        assert person.node_id == "100001"
        with pytest.raises(NotFound):
            await store.get_person("Jean DUPONT")

    async def test_rename_onto_existing_name_conflicts(self, store: GraphStore) -> None:
        await seed_graph(store, [("Jean DUPONT", "100001"), ("Marie MARTIN", "100002")])
        with pytest.raises(ConflictError):
            await store.update_person("Jean DUPONT", new_name="Marie MARTIN")

    async def test_move(self, store: GraphStore) -> None:
        await store.add_person("Jean DUPONT", "100001")
        person = await store.move_person("Jean DUPONT", 3.5, -4.0)
        assert (person.x, person.y) == (3.5, -4.0)

    async def test_delete_detaches_edges(self, store: GraphStore) -> None:
        await seed_graph(
            store,
            [("Jean DUPONT", "100001"), ("Marie MARTIN", "100002"), ("Paul DURAND", "100003")],
            [
                ("Jean DUPONT", "Marie MARTIN", "AMIS"),
                ("Paul DURAND", "Jean DUPONT", "FAMILLE"),
                ("Marie MARTIN", "Paul DURAND", "AMOUR"),
            ],
        )

        await store.delete_person("Jean DUPONT")
        graph = await store.fetch_graph()

        assert [p.name for p in graph.persons] == ["Marie MARTIN", "Paul DURAND"]
        assert graph.edges == [EdgeRecord("Marie MARTIN", "Paul DURAND", "AMOUR", "200003")]


class TestRelations:
    async def test_add_relation_requires_both_endpoints(self, store: GraphStore) -> None:
        await store.add_person("Jean DUPONT", "100001")
        with pytest.raises(NotFound):
            await store.add_relation("Jean DUPONT", "Marie MARTIN", "AMIS", "200001")

    async def test_delete_relation(self, store: GraphStore) -> None:
        await seed_graph(
            store,
            [("Jean DUPONT", "100001"), ("Marie MARTIN", "100002")],
            [("Jean DUPONT", "Marie MARTIN", "AMIS"), ("Jean DUPONT", "Marie MARTIN", "AMOUR")],
        )

        removed = await store.delete_relation("Jean DUPONT", "Marie MARTIN", "AMIS")
        graph = await store.fetch_graph()

        assert removed == 1
        assert [e.type for e in graph.edges] == ["AMOUR"]

    async def test_delete_missing_relation(self, store: GraphStore) -> None:
        await seed_graph(store, [("Jean DUPONT", "100001"), ("Marie MARTIN", "100002")])
        with pytest.raises(NotFound):
            await store.delete_relation("Jean DUPONT", "Marie MARTIN", "AMIS")

    async def test_direction_matters_for_delete(self, store: GraphStore) -> None:
        await seed_graph(
            store,
            [("Jean DUPONT", "100001"), ("Marie MARTIN", "100002")],
            [("Jean DUPONT", "Marie MARTIN", "AMIS")],
        )
        with pytest.raises(NotFound):
            await store.delete_relation("Marie MARTIN", "Jean DUPONT", "AMIS")


class TestFetchGraph:
    async def test_ordering_is_by_name(self, store: GraphStore) -> None:
        await seed_graph(
            store,
            [("Zoe ZOLA", "100003"), ("Anne ALPHA", "100001"), ("Marc MARTIN", "100002")],
            [
                ("Zoe ZOLA", "Anne ALPHA", "AMIS"),
                ("Anne ALPHA", "Zoe ZOLA", "FAMILLE"),
                ("Anne ALPHA", "Marc MARTIN", "AMIS"),
            ],
        )

        graph = await store.fetch_graph()

        assert [p.name for p in graph.persons] == ["Anne ALPHA", "Marc MARTIN", "Zoe ZOLA"]
        assert [(e.source, e.target) for e in graph.edges] == [
            ("Anne ALPHA", "Marc MARTIN"),
            ("Anne ALPHA", "Zoe ZOLA"),
            ("Zoe ZOLA", "Anne ALPHA"),
        ]

    async def test_clear_keeps_nothing(self, store: GraphStore) -> None:
        await seed_graph(
            store,
            [("Jean DUPONT", "100001"), ("Marie MARTIN", "100002")],
            [("Jean DUPONT", "Marie MARTIN", "AMIS")],
        )

        assert await store.clear() == (2, 1)
        graph = await store.fetch_graph()
        assert graph.persons == [] and graph.edges == []


class TestIdentifierBackfill:
    async def test_missing_and_malformed_ids_are_assigned(
        self, db_session: AsyncSession, store: GraphStore, ids: IdentifierGenerator
    ) -> None:
        legacy = Person(**make_person(name="Old LEGACY", node_id=None))
        broken = Person(**make_person(name="Bad IDENT", node_id="12ab"))
        good = Person(**make_person(name="Good PERSON", node_id="100001"))
        db_session.add_all([legacy, broken, good])
        await db_session.flush()
        db_session.add(
            Relation(source_id=legacy.id, target_id=good.id, relation_type="AMIS", edge_id=None)
        )
        await db_session.flush()

        assert await ids.migrate_missing_ids() == (2, 1)

        graph = await store.fetch_graph()
        node_ids = [p.node_id for p in graph.persons]
        assert all(n is not None and len(n) == 6 and n.isdigit() for n in node_ids)
        assert len(set(node_ids)) == 3
        assert (await store.get_person("Good PERSON")).node_id == "100001"
        assert graph.edges[0].edge_id is not None

    async def test_backfill_is_idempotent(self, store: GraphStore, ids: IdentifierGenerator) -> None:
        await store.add_person("Old LEGACY", None)
        await ids.migrate_missing_ids()
        first = (await store.get_person("Old LEGACY")).node_id

        assert await ids.migrate_missing_ids() == (0, 0)
        assert (await store.get_person("Old LEGACY")).node_id == first
