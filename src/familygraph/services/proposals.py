# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Change proposals: submit, review, apply.

A proposal is created ``pending`` and moves exactly once to ``approved`` or
``rejected``. Approval applies the change to the person graph; the graph
mutation and the status update are committed together, after the automatic
snapshot has been written. If the mutation fails it is rolled back and the
proposal is rejected with an explanatory comment before the error is raised.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from familygraph.auth.viewer import Admin, Anonymous, Authenticated, ViewerContext
from familygraph.errors import (
    ApplyFailure,
    AuthenticationRequired,
    ConflictError,
    FamilyGraphError,
    NotFound,
    UpstreamUnavailable,
    ValidationError,
)
from familygraph.models.proposal import PROPOSAL_STATUSES, PROPOSAL_TYPES, Proposal
from familygraph.repositories.proposal_repository import ProposalRepository
from familygraph.services.graph_store import GraphStore
from familygraph.services.ids import IdentifierGenerator
from familygraph.services.snapshots import SnapshotManager
from familygraph.services.validation import (
    normalize_origins,
    parse_coordinate,
    validate_name,
    validate_relation_type,
)

logger = logging.getLogger(__name__)

STATUS_FILTERS = (*PROPOSAL_STATUSES, "all")


def _required_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{key}' is required", {key: value})
    return value.strip()


class ProposalEngine:
    def __init__(
        self,
        store: GraphStore,
        snapshots: SnapshotManager,
        ids: IdentifierGenerator | None = None,
    ) -> None:
        self.store = store
        self.session = store.session
        self.snapshots = snapshots
        self.ids = ids or IdentifierGenerator(store)
        self.proposals = ProposalRepository(store.session)
        self._appliers: dict[str, Callable[[dict[str, Any], str], Awaitable[None]]] = {
            "add_node": self._apply_add_node,
            "add_relation": self._apply_add_relation,
            "modify_node": self._apply_modify_node,
            "delete_node": self._apply_delete_node,
            "delete_relation": self._apply_delete_relation,
        }

    # -- Submission ----------------------------------------------------------

    async def submit(
        self,
        viewer: ViewerContext,
        proposal_type: str,
        data: dict[str, Any],
        author_name: str | None = None,
    ) -> Proposal:
        match viewer:
            case Admin():
                author_email = None
                author_name = author_name or "Admin"
            case Authenticated(node_id=node_id, email=email):
                person = await self.store.persons.get_by_node_id(node_id)
                author_email = email
                author_name = person.name if person is not None else email
            case _:
                raise AuthenticationRequired()

        if proposal_type not in PROPOSAL_TYPES:
            raise ValidationError(
                "Invalid proposal type",
                {"type": proposal_type, "allowed": list(PROPOSAL_TYPES)},
            )

        proposal = Proposal(
            author_name=author_name,
            author_email=author_email,
            proposal_type=proposal_type,
            data=data,
            status="pending",
        )
        proposal = await self.proposals.create(proposal)
        await self.session.commit()
        logger.info("Proposal %s (%s) submitted by %s", proposal.id, proposal_type, author_name)
        return proposal

    # -- Review --------------------------------------------------------------

    async def _load(self, proposal_id: str | UUID) -> Proposal:
        try:
            key = proposal_id if isinstance(proposal_id, UUID) else UUID(proposal_id)
        except ValueError:
            raise NotFound("Proposal not found", {"id": proposal_id})
        proposal = await self.proposals.get_by_id(key)
        if proposal is None:
            raise NotFound("Proposal not found", {"id": str(proposal_id)})
        return proposal

    async def _load_pending(self, proposal_id: str | UUID) -> Proposal:
        proposal = await self._load(proposal_id)
        if proposal.status != "pending":
            raise ConflictError(f"Proposal already {proposal.status}")
        return proposal

    @staticmethod
    def _check_reviewer(reviewed_by: str | None) -> str:
        if reviewed_by is None or not reviewed_by.strip():
            raise ValidationError("reviewedBy is required")
        return reviewed_by.strip()

    @staticmethod
    def _close(proposal: Proposal, status: str, reviewed_by: str, comment: str | None) -> None:
        proposal.status = status
        proposal.reviewed_at = datetime.now(timezone.utc)
        proposal.reviewed_by = reviewed_by
        proposal.comment = comment

    async def approve(
        self, proposal_id: str | UUID, reviewed_by: str | None, comment: str | None = None
    ) -> tuple[Proposal, dict[str, str]]:
        """Apply a pending proposal. Returns the proposal and its snapshot."""
        reviewer = self._check_reviewer(reviewed_by)
        proposal = await self._load_pending(proposal_id)
        key, proposal_type = proposal.id, proposal.proposal_type

        try:
            await self._apply(proposal_type, proposal.data, reviewer)
        except (FamilyGraphError, SQLAlchemyError) as exc:
            await self._auto_reject(key, reviewer, exc)
            reason = exc.message if isinstance(exc, FamilyGraphError) else str(exc)
            raise ApplyFailure(
                "Failed to apply proposal",
                {"proposalId": str(key), "type": proposal_type, "reason": reason},
            ) from exc

        try:
            snapshot = await self.snapshots.create(
                f"Proposal {key} approved ({proposal_type})", reviewer
            )
        except UpstreamUnavailable:
            # Nothing is kept without its snapshot; the proposal stays pending.
            await self.session.rollback()
            raise
        self._close(proposal, "approved", reviewer, comment)
        await self.session.commit()
        logger.info("Proposal %s (%s) approved by %s", key, proposal_type, reviewer)
        return proposal, snapshot

    async def _auto_reject(self, key: UUID, reviewer: str, exc: Exception) -> None:
        await self.session.rollback()
        reason = exc.message if isinstance(exc, FamilyGraphError) else str(exc)
        proposal = await self._load(key)
        self._close(proposal, "rejected", reviewer, f"Automatic rejection: {reason}")
        await self.session.commit()
        logger.warning("Proposal %s could not be applied and was rejected: %s", key, reason)

    async def reject(
        self, proposal_id: str | UUID, reviewed_by: str | None, comment: str | None = None
    ) -> Proposal:
        reviewer = self._check_reviewer(reviewed_by)
        proposal = await self._load_pending(proposal_id)
        self._close(proposal, "rejected", reviewer, comment)
        await self.session.commit()
        logger.info("Proposal %s rejected by %s", proposal.id, reviewer)
        return proposal

    # -- Application ---------------------------------------------------------

    async def _apply(self, proposal_type: str, data: Any, actor: str) -> None:
        applier = self._appliers.get(proposal_type)
        if applier is None:
            raise ValidationError("Invalid proposal type", {"type": proposal_type})
        if not isinstance(data, dict):
            raise ValidationError("Proposal data must be an object")
        await applier(data, actor)

    async def _apply_add_node(self, data: dict[str, Any], actor: str) -> None:
        name = validate_name(data.get("name"))
        node_id = await self.ids.generate_node_id()
        await self.store.add_person(
            name,
            node_id,
            origins=normalize_origins(data.get("origins")),
            x=parse_coordinate(data.get("x"), "x"),
            y=parse_coordinate(data.get("y"), "y"),
        )
        await self.store.events.record(node_id, "create", actor)

    async def _apply_add_relation(self, data: dict[str, Any], actor: str) -> None:
        relation_type = validate_relation_type(data.get("type"))
        source = _required_str(data, "source")
        target = _required_str(data, "target")
        edge_id = await self.ids.generate_edge_id()
        await self.store.add_relation(source, target, relation_type, edge_id)

    async def _apply_modify_node(self, data: dict[str, Any], actor: str) -> None:
        name = _required_str(data, "name")
        new_name = data.get("newName")
        if new_name is not None:
            new_name = validate_name(new_name)
        new_origins = data.get("newOrigins")
        person = await self.store.update_person(
            name,
            new_name=new_name,
            origins=normalize_origins(new_origins) if new_origins is not None else None,
        )
        if person.node_id is not None:
            await self.store.events.record(person.node_id, "update", actor)

    async def _apply_delete_node(self, data: dict[str, Any], actor: str) -> None:
        person = await self.store.delete_person(_required_str(data, "name"))
        if person.node_id is not None:
            await self.store.events.record(person.node_id, "delete", actor)

    async def _apply_delete_relation(self, data: dict[str, Any], actor: str) -> None:
        relation_type = validate_relation_type(data.get("type"))
        await self.store.delete_relation(
            _required_str(data, "source"), _required_str(data, "target"), relation_type
        )

    # -- Scoped reads --------------------------------------------------------

    @staticmethod
    def _scope(viewer: ViewerContext) -> str | None:
        """Author email the viewer is limited to; ``None`` means everything."""
        match viewer:
            case Admin():
                return None
            case Authenticated(email=email):
                return email
            case _:
                raise AuthenticationRequired()

    async def list_proposals(
        self, viewer: ViewerContext, status: str = "pending"
    ) -> list[Proposal]:
        if status not in STATUS_FILTERS:
            raise ValidationError("Invalid status filter", {"allowed": list(STATUS_FILTERS)})
        if isinstance(viewer, Anonymous):
            return []
        author_email = self._scope(viewer)
        return await self.proposals.list_filtered(
            status=None if status == "all" else status,
            author_email=author_email,
        )

    async def get(self, viewer: ViewerContext, proposal_id: str) -> Proposal:
        author_email = self._scope(viewer)
        proposal = await self._load(proposal_id)
        if author_email is not None and proposal.author_email != author_email:
            raise NotFound("Proposal not found", {"id": proposal_id})
        return proposal

    async def stats(self, viewer: ViewerContext) -> dict[str, int]:
        counts = {status: 0 for status in PROPOSAL_STATUSES}
        try:
            author_email = self._scope(viewer)
        except AuthenticationRequired:
            return {**counts, "total": 0}
        counts.update(await self.proposals.count_by_status(author_email=author_email))
        return {**counts, "total": sum(counts.values())}
