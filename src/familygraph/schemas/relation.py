# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from pydantic import Field

from familygraph.schemas.common import CamelModel


class RelationBody(CamelModel):
    source: str
    target: str
    relation_type: str = Field(alias="type")


class RelationResponse(CamelModel):
    source: str
    target: str
    relation_type: str = Field(alias="type")
    edge_id: str | None
