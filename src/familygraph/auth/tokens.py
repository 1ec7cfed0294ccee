# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Signed access tokens, sent as a bearer header or as the session cookie."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from familygraph.config import get_settings
from familygraph.models.user import User

ALGORITHM = "HS256"


def token_lifetime() -> timedelta:
    return timedelta(minutes=get_settings().access_token_expire_minutes)


def create_access_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.id),
        # Informational only; the viewer is always rebuilt from the users table.
        "node": user.person_node_id,
        "iat": now,
        "exp": now + token_lifetime(),
    }
    return jwt.encode(claims, get_settings().jwt_secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> UUID:
    """Return the user id carried by ``token``.

    Raises jwt.InvalidTokenError on a bad signature, an expired token or a
    missing claim, and ValueError when ``sub`` is not a UUID.
    """
    claims = jwt.decode(
        token,
        get_settings().jwt_secret_key,
        algorithms=[ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    return UUID(claims["sub"])
