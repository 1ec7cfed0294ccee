# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from familygraph import __version__
from familygraph.api.auth import limiter
from familygraph.api.router import api_router
from familygraph.config import get_settings
from familygraph.db.session import create_engine, create_session_factory
from familygraph.errors import install_error_handlers
from familygraph.logging_config import configure_logging
from familygraph.services.graph_store import GraphStore
from familygraph.services.ids import IdentifierGenerator
from familygraph.services.snapshots import SnapshotManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    settings = get_settings()
    configure_logging(settings)

    # Startup: auto-migrate in development mode
    if settings.environment == "development":
        import subprocess

        subprocess.run(["alembic", "upgrade", "head"], check=True)

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    async with session_factory() as session:
        store = GraphStore(session)
        SnapshotManager(store, settings.snapshots_dir).ensure_directory()
        if settings.migrate_ids_on_startup:
            await IdentifierGenerator(store).migrate_missing_ids()
            await session.commit()

    # Store on app state for access in endpoints
    app.state.engine = engine
    app.state.session_factory = session_factory
    logger.info("familygraph %s started (%s)", __version__, settings.environment)

    yield

    # Shutdown: cleanup
    await engine.dispose()


app = FastAPI(
    title="FamilyGraph",
    version=__version__,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
install_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe. Returns 200 if the process is running."""
    return {"status": "healthy"}


@app.get("/ready")
async def ready(request: Request) -> dict[str, str]:
    """Readiness probe. Checks database connectivity."""
    engine = request.app.state.engine
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return {"status": "ready"}
