# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.models.person import Person
from familygraph.repositories.base import BaseRepository


class PersonRepository(BaseRepository[Person]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Person)

    async def get_by_name(self, name: str) -> Person | None:
        result = await self.session.execute(select(Person).where(Person.name == name))
        return result.scalar_one_or_none()

    async def get_by_node_id(self, node_id: str) -> Person | None:
        result = await self.session.execute(select(Person).where(Person.node_id == node_id))
        return result.scalar_one_or_none()

    async def node_id_exists(self, node_id: str) -> bool:
        result = await self.session.execute(
            select(Person.id).where(Person.node_id == node_id).limit(1)
        )
        return result.first() is not None

    async def list_ordered(self) -> list[Person]:
        result = await self.session.execute(select(Person).order_by(Person.name))
        return list(result.scalars().all())

    async def search_by_name(self, query: str | None) -> list[Person]:
        stmt = select(Person).where(Person.node_id.is_not(None)).order_by(Person.name)
        if query:
            stmt = stmt.where(func.lower(Person.name).contains(query.lower()))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(Person))
        await self.session.flush()
        return result.rowcount or 0
