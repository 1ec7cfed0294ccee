# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.models.node_event import NodeEvent
from familygraph.repositories.base import BaseRepository


class NodeEventRepository(BaseRepository[NodeEvent]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, NodeEvent)

    async def record(
        self,
        node_id: str,
        action: str,
        created_by: str | None,
        visibility_level: int | None = None,
    ) -> NodeEvent:
        event = NodeEvent(
            node_id=node_id,
            action=action,
            created_by=created_by,
            created_with_visibility_level=visibility_level,
        )
        return await self.create(event)

    async def list_for_node(self, node_id: str | None = None) -> list[NodeEvent]:
        stmt = select(NodeEvent).order_by(NodeEvent.created_at.desc())
        if node_id is not None:
            stmt = stmt.where(NodeEvent.node_id == node_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
