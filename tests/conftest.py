# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

import os

# Settings are read on first use; make sure the app can be imported without a
# real database or a .env file.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import AsyncIterator, Callable, Iterator  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from fastapi import Depends, FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from familygraph.api.auth import limiter  # noqa: E402
from familygraph.api.deps import (  # noqa: E402
    get_graph_store,
    get_identifier_generator,
    get_snapshot_manager,
)
from familygraph.db.session import get_db  # noqa: E402
from familygraph.main import app  # noqa: E402
from familygraph.models.base import Base  # noqa: E402
from familygraph.services.graph_store import GraphStore  # noqa: E402
from familygraph.services.ids import IdentifierGenerator  # noqa: E402
from familygraph.services.proposals import ProposalEngine  # noqa: E402
from familygraph.services.snapshots import SnapshotManager  # noqa: E402

ADMIN_URL = "http://localhost"
PUBLIC_URL = "http://example.com"


def _get_test_database_url() -> str:
    """Return the test database URL from env, falling back to in-memory SQLite."""
    return os.environ.get(
        "TEST_DATABASE_URL",
        "sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Create an async engine for the test database."""
    url = _get_test_database_url()
    if url.startswith("sqlite"):
        # One shared connection so every session sees the same memory database.
        engine = create_async_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Provide a database session that rolls back after each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    return tmp_path / "snapshots"


@pytest.fixture
def store(db_session: AsyncSession) -> GraphStore:
    return GraphStore(db_session)


@pytest.fixture
def ids(store: GraphStore) -> IdentifierGenerator:
    return IdentifierGenerator(store)


@pytest.fixture
def snapshots(store: GraphStore, snapshot_dir: Path, ids: IdentifierGenerator) -> SnapshotManager:
    return SnapshotManager(store, snapshot_dir, ids)


@pytest.fixture
def proposal_engine(
    store: GraphStore, snapshots: SnapshotManager, ids: IdentifierGenerator
) -> ProposalEngine:
    return ProposalEngine(store, snapshots, ids)


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


@pytest.fixture
def test_app(
    session_factory: async_sessionmaker[AsyncSession], snapshot_dir: Path
) -> Iterator[FastAPI]:
    """The FastAPI app wired to the test database and snapshot directory."""

    async def _get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    def _get_snapshot_manager(
        store: GraphStore = Depends(get_graph_store),
        ids: IdentifierGenerator = Depends(get_identifier_generator),
    ) -> SnapshotManager:
        return SnapshotManager(store, snapshot_dir, ids)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_snapshot_manager] = _get_snapshot_manager
    limiter.enabled = False
    yield app
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def make_client(test_app: FastAPI) -> Callable[..., AsyncClient]:
    """Build clients; the Host header decides whether the caller is the admin."""

    def _make(base_url: str = PUBLIC_URL, token: str | None = None) -> AsyncClient:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return AsyncClient(
            transport=ASGITransport(app=test_app), base_url=base_url, headers=headers
        )

    return _make


@pytest.fixture
async def admin_client(make_client: Callable[..., AsyncClient]) -> AsyncIterator[AsyncClient]:
    async with make_client(ADMIN_URL) as client:
        yield client


@pytest.fixture
async def public_client(make_client: Callable[..., AsyncClient]) -> AsyncIterator[AsyncClient]:
    async with make_client(PUBLIC_URL) as client:
        yield client


# ---------------------------------------------------------------------------
# Factory helpers for creating model instances in tests
# ---------------------------------------------------------------------------


def make_person(
    *,
    name: str = "Jean DUPONT",
    node_id: str | None = "100001",
    origins: list[str] | None = None,
    x: float = 0.0,
    y: float = 0.0,
) -> dict[str, object]:
    """Return kwargs suitable for constructing a Person model instance."""
    return {
        "name": name,
        "node_id": node_id,
        "origins": origins if origins is not None else [],
        "x": x,
        "y": y,
    }


def make_user(
    *,
    email: str = "jean@example.com",
    password_hash: str = "not-a-real-hash",
    person_node_id: str = "100001",
    visibility_level: int = 1,
) -> dict[str, object]:
    """Return kwargs suitable for constructing a User model instance."""
    return {
        "email": email,
        "password_hash": password_hash,
        "person_node_id": person_node_id,
        "visibility_level": visibility_level,
    }


async def seed_graph(
    store: GraphStore,
    persons: list[tuple[str, str | None]],
    edges: list[tuple[str, str, str]] | None = None,
) -> None:
    """Add ``(name, node_id)`` persons and ``(source, target, type)`` edges."""
    for index, (name, node_id) in enumerate(persons):
        await store.add_person(name, node_id, origins=["Lyon"], x=float(index), y=0.0)
    for index, (source, target, relation_type) in enumerate(edges or []):
        await store.add_relation(source, target, relation_type, f"{200001 + index}")
