# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from pydantic import Field

from familygraph.schemas.common import CamelModel


class SnapshotCreate(CamelModel):
    message: str = Field(min_length=1, max_length=1_000)
    author: str = Field(min_length=1, max_length=200)


class SnapshotCreated(CamelModel):
    message: str
    id: str
    filename: str
    timestamp: str


class SnapshotSummary(CamelModel):
    id: str
    filename: str
    timestamp: str
    message: str
    author: str
    nodes_count: int
    edges_count: int


class RestoreRequest(CamelModel):
    author: str = Field(min_length=1, max_length=200)


class RestoreResponse(CamelModel):
    message: str
    nodes_restored: int
    edges_restored: int
    backup_created: bool
    backup_id: str
