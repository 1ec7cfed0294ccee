# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from typing import Any

from pydantic import Field

from familygraph.schemas.common import CamelModel


class ImportRequest(CamelModel):
    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]] = Field(default_factory=list)


class ImportResponse(CamelModel):
    message: str
    nodes_count: int
    edges_count: int


class ClearResponse(CamelModel):
    message: str
    nodes_deleted: int
    edges_deleted: int
