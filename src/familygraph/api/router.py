# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from fastapi import APIRouter

from familygraph.api.auth import router as auth_router
from familygraph.api.graph import router as graph_router
from familygraph.api.persons import router as persons_router
from familygraph.api.proposals import router as proposals_router
from familygraph.api.relations import router as relations_router
from familygraph.api.snapshots import router as snapshots_router
from familygraph.api.transfer import router as transfer_router
from familygraph.api.users import router as users_router

api_router = APIRouter()
api_router.include_router(graph_router)
api_router.include_router(persons_router)
api_router.include_router(relations_router)
api_router.include_router(proposals_router)
api_router.include_router(snapshots_router)
api_router.include_router(transfer_router)
api_router.include_router(auth_router)
api_router.include_router(users_router)
