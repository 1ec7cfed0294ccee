# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Per-request identity resolution.

``get_viewer`` turns transport details (Host header, bearer token, session
cookie) into a :data:`ViewerContext` exactly once per request.
"""

from __future__ import annotations

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from familygraph.auth.tokens import decode_access_token
from familygraph.auth.viewer import Admin, Anonymous, Authenticated, ViewerContext
from familygraph.config import get_settings
from familygraph.db.session import get_db
from familygraph.errors import AuthenticationRequired, AuthorizationDenied
from familygraph.models.user import User
from familygraph.repositories.user_repository import UserRepository

_bearer_scheme_optional = HTTPBearer(auto_error=False)


def request_host(request: Request) -> str:
    """Hostname from the Host header, without port or IPv6 brackets."""
    host = request.headers.get("host", "")
    if host.startswith("["):
        return host[1:].split("]", 1)[0]
    return host.rsplit(":", 1)[0] if host.count(":") == 1 else host


def is_admin_request(request: Request) -> bool:
    return request_host(request).lower() in get_settings().admin_hosts


async def get_optional_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme_optional),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """User behind the bearer token or session cookie, if any."""
    token = credentials.credentials if credentials is not None else None
    if token is None:
        token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        return None

    try:
        user_id = decode_access_token(token)
    except (jwt.InvalidTokenError, ValueError, KeyError):
        return None

    return await UserRepository(db).get_by_id(user_id)


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """Require a valid token and return the user."""
    if user is None:
        raise AuthenticationRequired()
    return user


async def get_viewer(
    request: Request,
    user: User | None = Depends(get_optional_user),
) -> ViewerContext:
    if is_admin_request(request):
        return Admin()
    if user is None:
        return Anonymous()
    return Authenticated(
        node_id=user.person_node_id,
        visibility_level=user.visibility_level,
        email=user.email,
    )


async def require_admin(viewer: ViewerContext = Depends(get_viewer)) -> Admin:
    if not isinstance(viewer, Admin):
        raise AuthorizationDenied()
    return viewer
