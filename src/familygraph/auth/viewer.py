# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Who is asking.

A :data:`ViewerContext` is resolved once per request (see
:mod:`familygraph.auth.dependencies`) and handed to the services as a plain
argument. Services never look at transport details themselves.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Admin:
    pass


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    node_id: str
    visibility_level: int
    email: str


type ViewerContext = Admin | Anonymous | Authenticated


def actor_label(viewer: ViewerContext) -> str | None:
    """Name recorded in audit rows for mutations made by ``viewer``."""
    match viewer:
        case Admin():
            return "admin"
        case Authenticated(email=email):
            return email
        case _:
            return None
