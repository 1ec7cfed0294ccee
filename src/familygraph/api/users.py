# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.auth.dependencies import require_admin
from familygraph.auth.viewer import Admin
from familygraph.db.session import get_db
from familygraph.errors import NotFound
from familygraph.repositories.user_repository import UserRepository
from familygraph.schemas.auth import UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: Admin = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    users = await UserRepository(db).list_ordered()
    return [UserResponse.model_validate(u) for u in users]


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    _admin: Admin = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Change a member's visibility level."""
    repo = UserRepository(db)
    user = await repo.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found", {"id": str(user_id)})
    user.visibility_level = body.visibility_level
    await db.commit()
    return UserResponse.model_validate(user)
