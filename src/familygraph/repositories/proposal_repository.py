# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.models.proposal import Proposal
from familygraph.repositories.base import BaseRepository


class ProposalRepository(BaseRepository[Proposal]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Proposal)

    async def list_filtered(
        self,
        *,
        status: str | None = None,
        author_email: str | None = None,
    ) -> list[Proposal]:
        """List proposals newest first. ``None`` filters are not applied."""
        stmt = select(Proposal).order_by(Proposal.created_at.desc())
        if status is not None:
            stmt = stmt.where(Proposal.status == status)
        if author_email is not None:
            stmt = stmt.where(Proposal.author_email == author_email)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_status(self, *, author_email: str | None = None) -> dict[str, int]:
        stmt = select(Proposal.status, func.count()).group_by(Proposal.status)
        if author_email is not None:
            stmt = stmt.where(Proposal.author_email == author_email)
        result = await self.session.execute(stmt)
        return {status: count for status, count in result.all()}
