# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from fastapi import APIRouter, Depends

from familygraph.api.deps import get_graph_store, get_identifier_generator
from familygraph.auth.dependencies import require_admin
from familygraph.auth.viewer import Admin
from familygraph.schemas.common import MessageResponse
from familygraph.schemas.relation import RelationBody, RelationResponse
from familygraph.services.graph_store import GraphStore
from familygraph.services.ids import IdentifierGenerator
from familygraph.services.validation import validate_relation_type

router = APIRouter(prefix="/relation", tags=["relations"])


@router.post("", response_model=RelationResponse, status_code=201)
async def create_relation(
    body: RelationBody,
    _admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
    ids: IdentifierGenerator = Depends(get_identifier_generator),
) -> RelationResponse:
    relation_type = validate_relation_type(body.relation_type)
    edge_id = await ids.generate_edge_id()
    await store.add_relation(body.source, body.target, relation_type, edge_id)
    await store.session.commit()
    return RelationResponse(
        source=body.source,
        target=body.target,
        relation_type=relation_type,
        edge_id=edge_id,
    )


@router.delete("", response_model=MessageResponse)
async def delete_relation(
    body: RelationBody,
    _admin: Admin = Depends(require_admin),
    store: GraphStore = Depends(get_graph_store),
) -> MessageResponse:
    relation_type = validate_relation_type(body.relation_type)
    removed = await store.delete_relation(body.source, body.target, relation_type)
    await store.session.commit()
    return MessageResponse(message=f"{removed} relation(s) deleted")
