# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from familygraph.repositories.base import BaseRepository
from familygraph.repositories.node_event_repository import NodeEventRepository
from familygraph.repositories.person_repository import PersonRepository
from familygraph.repositories.proposal_repository import ProposalRepository
from familygraph.repositories.relation_repository import RelationRepository
from familygraph.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "NodeEventRepository",
    "PersonRepository",
    "ProposalRepository",
    "RelationRepository",
    "UserRepository",
]
