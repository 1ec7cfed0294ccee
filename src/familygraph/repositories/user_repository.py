# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.models.user import User
from familygraph.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_person_node_id(self, node_id: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.person_node_id == node_id)
        )
        return result.scalar_one_or_none()

    async def claimed_node_ids(self) -> set[str]:
        result = await self.session.execute(select(User.person_node_id))
        return set(result.scalars().all())

    async def list_ordered(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.email))
        return list(result.scalars().all())
