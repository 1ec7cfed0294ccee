# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.auth.dependencies import get_current_user
from familygraph.auth.passwords import DUMMY_HASH, hash_password, verify_password
from familygraph.auth.tokens import create_access_token, token_lifetime
from familygraph.config import get_settings
from familygraph.db.session import get_db
from familygraph.errors import AuthenticationRequired, ConflictError, NotFound, ValidationError
from familygraph.models.user import User
from familygraph.repositories.person_repository import PersonRepository
from familygraph.repositories.user_repository import UserRepository
from familygraph.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from familygraph.schemas.common import MessageResponse
from familygraph.services.validation import is_valid_identifier

router = APIRouter(prefix="/auth", tags=["auth"])

limiter = Limiter(key_func=get_remote_address)


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=int(token_lifetime().total_seconds()),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit("10/minute")
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    if not is_valid_identifier(body.person_node_id):
        raise ValidationError("person_node_id must be a six digit id between 100000 and 999999")

    person = await PersonRepository(db).get_by_node_id(body.person_node_id)
    if person is None:
        raise NotFound("No person with this node id", {"person_node_id": body.person_node_id})

    users = UserRepository(db)
    if await users.get_by_person_node_id(body.person_node_id) is not None:
        raise ConflictError("Person already associated with an account")
    if await users.get_by_email(body.email) is not None:
        raise ConflictError("Email already registered")

    user = User(
        email=body.email,
        password_hash=hash_password(body.password),
        person_node_id=body.person_node_id,
        visibility_level=1,
    )
    user = await users.create(user)
    await db.commit()
    await db.refresh(user)

    token = create_access_token(user)
    _set_session_cookie(response, token)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    user = await UserRepository(db).get_by_email(body.email)

    if user is None:
        # Timing-safe: still run bcrypt verify against dummy hash
        verify_password(body.password, DUMMY_HASH)
        raise AuthenticationRequired("Invalid email or password")

    if not verify_password(body.password, user.password_hash):
        raise AuthenticationRequired("Invalid email or password")

    token = create_access_token(user)
    _set_session_cookie(response, token)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    response.delete_cookie(get_settings().session_cookie_name)
    return MessageResponse(message="Logged out")
