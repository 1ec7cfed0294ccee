# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from familygraph.models.person import Person
from familygraph.models.relation import Relation
from familygraph.repositories.base import BaseRepository


class RelationRepository(BaseRepository[Relation]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Relation)

    async def list_ordered(self) -> list[Relation]:
        source = aliased(Person)
        target = aliased(Person)
        result = await self.session.execute(
            select(Relation)
            .join(source, Relation.source_id == source.id)
            .join(target, Relation.target_id == target.id)
            .order_by(source.name, target.name, Relation.relation_type)
        )
        return list(result.scalars().all())

    async def edge_id_exists(self, edge_id: str) -> bool:
        result = await self.session.execute(
            select(Relation.id).where(Relation.edge_id == edge_id).limit(1)
        )
        return result.first() is not None

    async def find(
        self, source_id: UUID, target_id: UUID, relation_type: str
    ) -> list[Relation]:
        result = await self.session.execute(
            select(Relation).where(
                Relation.source_id == source_id,
                Relation.target_id == target_id,
                Relation.relation_type == relation_type,
            )
        )
        return list(result.scalars().all())

    async def delete_for_person(self, person_id: UUID) -> int:
        result = await self.session.execute(
            delete(Relation).where(
                or_(Relation.source_id == person_id, Relation.target_id == person_id)
            )
        )
        await self.session.flush()
        return result.rowcount or 0

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(Relation))
        await self.session.flush()
        return result.rowcount or 0
