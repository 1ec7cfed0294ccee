# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.api.deps import get_graph_store, get_graph_transfer, get_identifier_generator
from familygraph.auth.dependencies import require_admin
from familygraph.auth.viewer import Admin, actor_label
from familygraph.db.session import get_db
from familygraph.repositories.user_repository import UserRepository
from familygraph.schemas.common import MessageResponse
from familygraph.schemas.person import (
    AvailableForSignupResponse,
    NodeEventResponse,
    PersonCoordinates,
    PersonCreate,
    PersonRef,
    PersonResponse,
    PersonUpdate,
    SignupCandidate,
)
from familygraph.schemas.transfer import ClearResponse
from familygraph.services.graph_store import GraphStore
from familygraph.services.ids import IdentifierGenerator
from familygraph.services.transfer import GraphTransfer
from familygraph.services.validation import (
    IDENTIFIER_REGEX,
    normalize_origins,
    validate_name,
)

router = APIRouter(tags=["persons"])


@router.get("/person/{name}", response_model=PersonResponse)
async def get_person(
    name: str,
    _admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
) -> PersonResponse:
    return PersonResponse.from_model(await store.get_person(name))


@router.post("/person", response_model=PersonResponse, status_code=201)
async def create_person(
    body: PersonCreate,
    admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
    ids: IdentifierGenerator = Depends(get_identifier_generator),
) -> PersonResponse:
    name = validate_name(body.name)
    node_id = await ids.generate_node_id()
    person = await store.add_person(
        name, node_id, origins=normalize_origins(body.origins), x=body.x, y=body.y
    )
    await store.events.record(node_id, "create", actor_label(admin))
    await store.session.commit()
    return PersonResponse.from_model(person)


@router.patch("/person", response_model=PersonResponse)
async def update_person(
    body: PersonUpdate,
    admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
) -> PersonResponse:
    new_name = validate_name(body.name) if body.name is not None else None
    origins = normalize_origins(body.origins) if body.origins is not None else None
    person = await store.update_person(body.old_name, new_name=new_name, origins=origins)
    if person.node_id is not None:
        await store.events.record(person.node_id, "update", actor_label(admin))
    await store.session.commit()
    return PersonResponse.from_model(person)


@router.patch("/person/coordinates", response_model=PersonResponse)
async def move_person(
    body: PersonCoordinates,
    _admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
) -> PersonResponse:
    person = await store.move_person(body.name, body.x, body.y)
    await store.session.commit()
    return PersonResponse.from_model(person)


@router.delete("/person", response_model=MessageResponse)
async def delete_person(
    body: PersonRef,
    admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
) -> MessageResponse:
    person = await store.delete_person(body.name)
    if person.node_id is not None:
        await store.events.record(person.node_id, "delete", actor_label(admin))
    await store.session.commit()
    return MessageResponse(message=f"Person '{body.name}' deleted")


@router.delete("/all", response_model=ClearResponse)
async def delete_all(
    _admin: Admin = Depends(require_admin),
    transfer: GraphTransfer = Depends(get_graph_transfer),
) -> ClearResponse:
    counts = await transfer.clear()
    await transfer.store.session.commit()
    return ClearResponse(
        message="All persons and relations deleted",
        nodes_deleted=counts["nodesDeleted"],
        edges_deleted=counts["edgesDeleted"],
    )


@router.get("/persons/available-for-signup", response_model=AvailableForSignupResponse)
async def available_for_signup(
    q: str | None = Query(None, max_length=100),
    store: GraphStore = Depends(get_graph_store),
    db: AsyncSession = Depends(get_db),
) -> AvailableForSignupResponse:
    """Persons nobody has registered for yet, optionally filtered by name."""
    claimed = await UserRepository(db).claimed_node_ids()
    persons = await store.persons.search_by_name(q)
    return AvailableForSignupResponse(
        available=[
            SignupCandidate(node_id=p.node_id, name=p.name)
            for p in persons
            if p.node_id is not None and p.node_id not in claimed
        ]
    )


@router.get("/events", response_model=list[NodeEventResponse])
async def list_node_events(
    node_id: str | None = Query(None, pattern=f"^{IDENTIFIER_REGEX}$"),
    _admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
) -> list[NodeEventResponse]:
    events = await store.events.list_for_node(node_id)
    return [NodeEventResponse.from_model(e) for e in events]
