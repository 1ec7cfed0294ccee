# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from familygraph.models.base import Base, TimestampMixin, UUIDMixin
from familygraph.models.node_event import NodeEvent
from familygraph.models.person import Person
from familygraph.models.proposal import Proposal
from familygraph.models.relation import Relation
from familygraph.models.user import User

__all__ = [
    "Base",
    "NodeEvent",
    "Person",
    "Proposal",
    "Relation",
    "TimestampMixin",
    "UUIDMixin",
    "User",
]
