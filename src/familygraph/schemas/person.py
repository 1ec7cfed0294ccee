# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from familygraph.models.node_event import NodeEvent
from familygraph.models.person import Person
from familygraph.schemas.common import CamelModel


class PersonCreate(CamelModel):
    name: str
    origins: list[str] | str | None = None
    x: float
    y: float


class PersonUpdate(CamelModel):
    old_name: str
    name: str | None = None
    origins: list[str] | str | None = None


class PersonCoordinates(CamelModel):
    name: str
    x: float
    y: float


class PersonRef(CamelModel):
    name: str


class PersonResponse(CamelModel):
    node_id: str | None
    name: str
    origins: list[str]
    x: float
    y: float

    @classmethod
    def from_model(cls, person: Person) -> PersonResponse:
        return cls(
            node_id=person.node_id,
            name=person.name,
            origins=list(person.origins or []),
            x=person.x,
            y=person.y,
        )


class SignupCandidate(CamelModel):
    node_id: str
    name: str


class AvailableForSignupResponse(CamelModel):
    available: list[SignupCandidate]


class NodeEventResponse(CamelModel):
    id: UUID
    node_id: str
    action: str
    created_by: str | None
    created_with_visibility_level: int | None
    created_at: datetime

    @classmethod
    def from_model(cls, event: NodeEvent) -> NodeEventResponse:
        return cls(
            id=event.id,
            node_id=event.node_id,
            action=event.action,
            created_by=event.created_by,
            created_with_visibility_level=event.created_with_visibility_level,
            created_at=event.created_at,
        )
