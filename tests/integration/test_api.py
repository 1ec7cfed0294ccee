# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from familygraph.services.graph_store import GraphStore
from tests.conftest import PUBLIC_URL, seed_graph

PASSWORD = "correct horse"


@pytest.fixture
async def family(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Jean - Marie (AMIS), Marie - Paul (FAMILLE), Paul - Luc (AMOUR)."""
    async with session_factory() as session:
        store = GraphStore(session)
        await seed_graph(
            store,
            [
                ("Jean DUPONT", "100001"),
                ("Marie MARTIN", "100002"),
                ("Paul DURAND", "100003"),
                ("Luc MOREAU", "100004"),
            ],
            [
                ("Jean DUPONT", "Marie MARTIN", "AMIS"),
                ("Marie MARTIN", "Paul DURAND", "FAMILLE"),
                ("Paul DURAND", "Luc MOREAU", "AMOUR"),
            ],
        )
        await session.commit()


async def _register(
    client: AsyncClient, email: str = "jean@example.com", node_id: str = "100001"
) -> dict[str, Any]:
    response = await client.post(
        "/auth/register",
        json={"email": email, "password": PASSWORD, "person_node_id": node_id},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    async def test_health(self, public_client: AsyncClient) -> None:
        response = await public_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestGraphEndpoint:
    async def test_admin_view(self, family: None, admin_client: AsyncClient) -> None:
        body = (await admin_client.get("/graph")).json()

        assert len(body["nodes"]) == 4
        assert {n["name"] for n in body["nodes"]} == {
            "Jean DUPONT",
            "Marie MARTIN",
            "Paul DURAND",
            "Luc MOREAU",
        }
        assert {e["type"] for e in body["edges"]} == {"AMIS", "FAMILLE", "AMOUR"}

    async def test_admin_host_with_port(
        self, family: None, make_client: Callable[..., AsyncClient]
    ) -> None:
        async with make_client("http://127.0.0.1:8000") as client:
            body = (await client.get("/graph")).json()
        assert "name" in body["nodes"][0]

    async def test_anonymous_view(self, family: None, public_client: AsyncClient) -> None:
        body = (await public_client.get("/graph")).json()

        assert len(body["nodes"]) == 4
        assert all("name" not in n and "origins" not in n for n in body["nodes"])
        assert {e["type"] for e in body["edges"]} == {"CONNECTION"}

    async def test_member_view(
        self, family: None, public_client: AsyncClient, make_client: Callable[..., AsyncClient]
    ) -> None:
        auth = await _register(public_client)
        async with make_client(PUBLIC_URL, token=auth["access_token"]) as client:
            body = (await client.get("/graph")).json()

        named = {n["name"] for n in body["nodes"] if "name" in n}
        assert named == {"Jean DUPONT"}
        assert {e["type"] for e in body["edges"]} == {"CONNECTION"}

    async def test_member_view_follows_visibility_level(
        self,
        family: None,
        admin_client: AsyncClient,
        public_client: AsyncClient,
        make_client: Callable[..., AsyncClient],
    ) -> None:
        auth = await _register(public_client)
        response = await admin_client.patch(
            f"/users/{auth['user']['id']}", json={"visibility_level": 3}
        )
        assert response.status_code == 200
        assert response.json()["visibility_level"] == 3

        async with make_client(PUBLIC_URL, token=auth["access_token"]) as client:
            body = (await client.get("/graph")).json()

        named = {n["name"] for n in body["nodes"] if "name" in n}
        assert named == {"Jean DUPONT", "Marie MARTIN"}
        types = {e["edgeId"]: e["type"] for e in body["edges"]}
        assert types == {"200001": "AMIS", "200002": "FAMILLE", "200003": "CONNECTION"}


class TestAdminOnlyEndpoints:
    @pytest.mark.parametrize(
        ("method", "url", "body"),
        [
            ("POST", "/person", {"name": "Jean DUPONT", "x": 0, "y": 0}),
            ("DELETE", "/person", {"name": "Jean DUPONT"}),
            ("POST", "/relation", {"source": "A B", "target": "C D", "type": "AMIS"}),
            ("DELETE", "/all", None),
            ("GET", "/export", None),
            ("GET", "/snapshots", None),
            ("GET", "/users", None),
            ("GET", "/events", None),
        ],
    )
    async def test_public_host_gets_403(
        self, public_client: AsyncClient, method: str, url: str, body: dict[str, Any] | None
    ) -> None:
        response = await public_client.request(method, url, json=body)
        assert response.status_code == 403
        assert response.json() == {"error": "Administrator access required"}


class TestPersonEndpoints:
    async def test_create_and_get(self, admin_client: AsyncClient) -> None:
        response = await admin_client.post(
            "/person", json={"name": "Jean DUPONT", "origins": ["Paris"], "x": 1, "y": 2}
        )
        assert response.status_code == 201
        created = response.json()
        assert len(created["nodeId"]) == 6 and created["nodeId"].isdigit()

        fetched = (await admin_client.get("/person/Jean DUPONT")).json()
        assert fetched == created

        events = (await admin_client.get("/events", params={"node_id": created["nodeId"]})).json()
        assert [(e["action"], e["createdBy"]) for e in events] == [("create", "admin")]

    async def test_invalid_name(self, admin_client: AsyncClient) -> None:
        response = await admin_client.post("/person", json={"name": "jean dupont", "x": 0, "y": 0})
        assert response.status_code == 400
        assert "Firstname LASTNAME" in response.json()["error"]

    async def test_missing_fields(self, admin_client: AsyncClient) -> None:
        response = await admin_client.post("/person", json={"x": 0})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    async def test_duplicate(self, family: None, admin_client: AsyncClient) -> None:
        response = await admin_client.post("/person", json={"name": "Jean DUPONT", "x": 0, "y": 0})
        assert response.status_code == 400

    async def test_unknown_person(self, admin_client: AsyncClient) -> None:
        response = await admin_client.get("/person/Nobody HERE")
        assert response.status_code == 404

    async def test_update_move_delete(self, family: None, admin_client: AsyncClient) -> None:
        response = await admin_client.patch(
            "/person", json={"oldName": "Jean DUPONT", "name": "Jean DURAND", "origins": "Nice"}
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Jean DURAND"
        assert response.json()["origins"] == ["Nice"]

        response = await admin_client.patch(
            "/person/coordinates", json={"name": "Jean DURAND", "x": 7, "y": 8}
        )
        assert (response.json()["x"], response.json()["y"]) == (7, 8)

        response = await admin_client.request("DELETE", "/person", json={"name": "Jean DURAND"})
        assert response.status_code == 200
        body = (await admin_client.get("/graph")).json()
        assert len(body["nodes"]) == 3
        assert all("Jean DURAND" not in (e["source"], e["target"]) for e in body["edges"])

    async def test_delete_all(self, family: None, admin_client: AsyncClient) -> None:
        response = await admin_client.delete("/all")
        assert response.status_code == 200
        assert response.json()["nodesDeleted"] == 4
        assert response.json()["edgesDeleted"] == 3
        assert (await admin_client.get("/graph")).json() == {"nodes": [], "edges": []}

    async def test_available_for_signup(self, family: None, public_client: AsyncClient) -> None:
        await _register(public_client)

        everyone = (await public_client.get("/persons/available-for-signup")).json()
        filtered = (
            await public_client.get("/persons/available-for-signup", params={"q": "mar"})
        ).json()

        assert [p["name"] for p in everyone["available"]] == [
            "Luc MOREAU",
            "Marie MARTIN",
            "Paul DURAND",
        ]
        assert filtered["available"] == [{"nodeId": "100002", "name": "Marie MARTIN"}]


class TestRelationEndpoints:
    async def test_create_and_delete(self, family: None, admin_client: AsyncClient) -> None:
        body = {"source": "Jean DUPONT", "target": "Luc MOREAU", "type": "FAMILLE"}

        response = await admin_client.post("/relation", json=body)
        assert response.status_code == 201
        assert response.json()["type"] == "FAMILLE"
        assert len(response.json()["edgeId"]) == 6

        response = await admin_client.request("DELETE", "/relation", json=body)
        assert response.status_code == 200
        response = await admin_client.request("DELETE", "/relation", json=body)
        assert response.status_code == 404

    async def test_rejects_unsafe_type(self, family: None, admin_client: AsyncClient) -> None:
        response = await admin_client.post(
            "/relation",
            json={"source": "Jean DUPONT", "target": "Luc MOREAU", "type": "X]->() DELETE"},
        )
        assert response.status_code == 400


class TestAuth:
    async def test_register_login_me(self, family: None, make_client: Callable[..., AsyncClient]) -> None:
        async with make_client() as client:
            auth = await _register(client)
            assert auth["token_type"] == "bearer"
            assert auth["user"]["person_node_id"] == "100001"
            assert auth["user"]["visibility_level"] == 1

            response = await client.post(
                "/auth/login", json={"email": "jean@example.com", "password": PASSWORD}
            )
            assert response.status_code == 200
            token = response.json()["access_token"]

        async with make_client(token=token) as client:
            me = (await client.get("/auth/me")).json()
        assert me["email"] == "jean@example.com"

    async def test_session_cookie_authenticates(
        self, family: None, public_client: AsyncClient
    ) -> None:
        await _register(public_client)
        me = await public_client.get("/auth/me")
        assert me.status_code == 200

        await public_client.post("/auth/logout")
        public_client.cookies.clear()
        assert (await public_client.get("/auth/me")).status_code == 401

    async def test_person_can_only_be_claimed_once(
        self, family: None, public_client: AsyncClient
    ) -> None:
        await _register(public_client)
        response = await public_client.post(
            "/auth/register",
            json={"email": "other@example.com", "password": PASSWORD, "person_node_id": "100001"},
        )
        assert response.status_code == 400
        assert "already associated" in response.json()["error"]

    async def test_email_can_only_be_used_once(
        self, family: None, public_client: AsyncClient
    ) -> None:
        await _register(public_client)
        response = await public_client.post(
            "/auth/register",
            json={"email": "jean@example.com", "password": PASSWORD, "person_node_id": "100002"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Email already registered"

    @pytest.mark.parametrize(
        ("node_id", "status"),
        [("12345", 400), ("100001\n", 400), ("012345", 400), ("999999", 404)],
    )
    async def test_register_needs_existing_person(
        self, family: None, public_client: AsyncClient, node_id: str, status: int
    ) -> None:
        response = await public_client.post(
            "/auth/register",
            json={"email": "x@example.com", "password": PASSWORD, "person_node_id": node_id},
        )
        assert response.status_code == status

    async def test_wrong_password(self, family: None, public_client: AsyncClient) -> None:
        await _register(public_client)
        for email in ("jean@example.com", "nobody@example.com"):
            response = await public_client.post(
                "/auth/login", json={"email": email, "password": "wrong password"}
            )
            assert response.status_code == 401
            assert response.json()["error"] == "Invalid email or password"


class TestProposalEndpoints:
    async def test_anonymous_cannot_submit(self, public_client: AsyncClient) -> None:
        response = await public_client.post(
            "/proposals", json={"type": "add_node", "data": {"name": "Eva PETIT"}}
        )
        assert response.status_code == 401

    async def test_submit_list_approve(
        self,
        family: None,
        admin_client: AsyncClient,
        public_client: AsyncClient,
        make_client: Callable[..., AsyncClient],
    ) -> None:
        auth = await _register(public_client)
        async with make_client(token=auth["access_token"]) as member:
            response = await member.post(
                "/proposals",
                json={
                    "type": "add_relation",
                    "data": {"source": "Jean DUPONT", "target": "Luc MOREAU", "type": "AMIS"},
                },
            )
            assert response.status_code == 201
            proposal_id = response.json()["id"]

            mine = (await member.get("/proposals")).json()
            assert [p["id"] for p in mine] == [proposal_id]
            assert mine[0]["authorName"] == "Jean DUPONT"
            assert mine[0]["type"] == "add_relation"

            # Members cannot review.
            response = await member.post(
                f"/proposals/{proposal_id}/approve", json={"reviewedBy": "Jean"}
            )
            assert response.status_code == 403

        response = await admin_client.post(
            f"/proposals/{proposal_id}/approve", json={"reviewedBy": "Admin", "comment": "ok"}
        )
        assert response.status_code == 200
        reviewed = response.json()
        assert reviewed["snapshotCreated"] is True
        assert reviewed["proposal"]["status"] == "approved"

        snapshots = (await admin_client.get("/snapshots")).json()
        assert [s["id"] for s in snapshots] == [reviewed["snapshotId"]]

        response = await admin_client.post(
            f"/proposals/{proposal_id}/approve", json={"reviewedBy": "Admin"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Proposal already approved"

        stats = (await admin_client.get("/proposals/stats")).json()
        assert stats == {"pending": 0, "approved": 1, "rejected": 0, "total": 1}

    async def test_reviewer_required(self, admin_client: AsyncClient) -> None:
        created = await admin_client.post(
            "/proposals", json={"type": "add_node", "data": {"name": "Eva PETIT"}}
        )
        response = await admin_client.post(
            f"/proposals/{created.json()['id']}/reject", json={}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "reviewedBy is required"

    async def test_failed_apply(self, admin_client: AsyncClient) -> None:
        created = await admin_client.post(
            "/proposals",
            json={"type": "delete_node", "data": {"name": "Nobody HERE"}},
        )
        proposal_id = created.json()["id"]

        response = await admin_client.post(
            f"/proposals/{proposal_id}/approve", json={"reviewedBy": "Admin"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to apply proposal"
        assert body["details"]["proposalId"] == proposal_id
        stored = (await admin_client.get(f"/proposals/{proposal_id}")).json()
        assert stored["status"] == "rejected"
        assert stored["comment"].startswith("Automatic rejection")

    async def test_snapshot_storage_failure_keeps_proposal_pending(
        self, admin_client: AsyncClient
    ) -> None:
        created = await admin_client.post(
            "/proposals", json={"type": "add_node", "data": {"name": "Eva PETIT"}}
        )
        proposal_id = created.json()["id"]

        with patch.object(Path, "write_text", side_effect=OSError("disk full")):
            response = await admin_client.post(
                f"/proposals/{proposal_id}/approve", json={"reviewedBy": "Admin"}
            )

        assert response.status_code == 503
        assert response.json() == {
            "error": "Snapshot storage unavailable",
            "details": "disk full",
        }
        stored = (await admin_client.get(f"/proposals/{proposal_id}")).json()
        assert stored["status"] == "pending"
        assert (await admin_client.get("/graph")).json()["nodes"] == []

    async def test_unknown_proposal(self, admin_client: AsyncClient) -> None:
        response = await admin_client.get("/proposals/not-a-uuid")
        assert response.status_code == 404
        assert response.json()["error"] == "Proposal not found"

    async def test_stats_anonymous(self, public_client: AsyncClient) -> None:
        response = await public_client.get("/proposals/stats")
        assert response.status_code == 200
        assert response.json()["total"] == 0

    async def test_list_anonymous(
        self, admin_client: AsyncClient, public_client: AsyncClient
    ) -> None:
        await admin_client.post(
            "/proposals", json={"type": "add_node", "data": {"name": "Eva PETIT"}}
        )

        response = await public_client.get("/proposals", params={"status": "all"})

        assert response.status_code == 200
        assert response.json() == []


class TestSnapshotAndTransferEndpoints:
    async def test_snapshot_restore(self, family: None, admin_client: AsyncClient) -> None:
        created = await admin_client.post(
            "/snapshots", json={"message": "checkpoint", "author": "Admin"}
        )
        assert created.status_code == 201
        snapshot_id = created.json()["id"]

        await admin_client.delete("/all")
        response = await admin_client.post(
            f"/snapshots/restore/{snapshot_id}", json={"author": "Admin"}
        )

        assert response.status_code == 200
        assert response.json()["nodesRestored"] == 4
        assert response.json()["backupCreated"] is True
        assert len((await admin_client.get("/graph")).json()["nodes"]) == 4
        full = (await admin_client.get(f"/snapshots/{snapshot_id}")).json()
        assert full["message"] == "checkpoint"

    async def test_snapshot_storage_failure(self, admin_client: AsyncClient) -> None:
        with patch.object(Path, "write_text", side_effect=PermissionError("read-only")):
            response = await admin_client.post(
                "/snapshots", json={"message": "checkpoint", "author": "Admin"}
            )

        assert response.status_code == 503
        assert response.json()["error"] == "Snapshot storage unavailable"
        assert (await admin_client.get("/snapshots")).json() == []

    async def test_restore_unknown_snapshot(self, admin_client: AsyncClient) -> None:
        response = await admin_client.post("/snapshots/restore/deadbeef", json={"author": "Admin"})
        assert response.status_code == 404

    async def test_export_import(self, family: None, admin_client: AsyncClient) -> None:
        exported = (await admin_client.get("/export")).json()
        assert len(exported["nodes"]) == 4

        await admin_client.delete("/all")
        response = await admin_client.post(
            "/import", json={"nodes": exported["nodes"], "edges": exported["edges"]}
        )

        assert response.status_code == 200
        assert response.json()["nodesCount"] == 4
        assert response.json()["edgesCount"] == 3
        again = (await admin_client.get("/export")).json()
        assert again["nodes"] == exported["nodes"]
