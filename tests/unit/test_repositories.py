# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from unittest.mock import MagicMock

from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.models.node_event import NodeEvent
from familygraph.models.person import Person
from familygraph.models.proposal import Proposal
from familygraph.models.relation import Relation
from familygraph.models.user import User
from familygraph.repositories.base import BaseRepository
from familygraph.repositories.node_event_repository import NodeEventRepository
from familygraph.repositories.person_repository import PersonRepository
from familygraph.repositories.proposal_repository import ProposalRepository
from familygraph.repositories.relation_repository import RelationRepository
from familygraph.repositories.user_repository import UserRepository
from familygraph.services.graph_store import GraphStore


class TestBaseRepositoryInstantiation:
    def test_base_repository_stores_session_and_model(self) -> None:
        mock_session = MagicMock(spec=AsyncSession)
        repo = BaseRepository(mock_session, Person)
        assert repo.session is mock_session
        assert repo.model is Person


class TestRepositoryModels:
    def test_each_repository_sets_model(self) -> None:
        mock_session = MagicMock(spec=AsyncSession)
        assert PersonRepository(mock_session).model is Person
        assert RelationRepository(mock_session).model is Relation
        assert ProposalRepository(mock_session).model is Proposal
        assert UserRepository(mock_session).model is User
        assert NodeEventRepository(mock_session).model is NodeEvent

    def test_person_repository_has_custom_methods(self) -> None:
        repo = PersonRepository(MagicMock(spec=AsyncSession))
        for method in ("get_by_name", "get_by_node_id", "node_id_exists", "search_by_name"):
            assert callable(getattr(repo, method, None))

    def test_relation_repository_has_custom_methods(self) -> None:
        repo = RelationRepository(MagicMock(spec=AsyncSession))
        for method in ("list_ordered", "edge_id_exists", "find", "delete_for_person"):
            assert callable(getattr(repo, method, None))


class TestGraphStoreWiring:
    def test_store_shares_one_session(self) -> None:
        mock_session = MagicMock(spec=AsyncSession)
        store = GraphStore(mock_session)
        assert store.session is mock_session
        assert store.persons.session is mock_session
        assert store.relations.session is mock_session
        assert store.events.session is mock_session
