"""Audited Mutations — every mutating operation paired with its one audit row.

Invariants:
    - Sequence per call: validate (already done at boundary) -> persist -> audit -> return
    - Exactly one AuditTrail.record() per successful mutation, never before it
    - A mutation that raises writes no audit row
    - The acting identity comes from the resolved session, never from input;
      it is stamped as created_by and as the audit admin_id

Design Decisions:
    - One class owns the persist/audit pairing so routes cannot forget or
      duplicate the audit call (ADR: audit placement in one place, not per route)
    - Stores typed against core protocols: swappable in tests
"""

import logging

from travelcrm.core.admin_rules import check_admin_change, removes_admin_access
from travelcrm.core.audit_details import (
    describe_admin, describe_client, describe_interaction,
)
from travelcrm.core.domain_types import AuditAction, EntityType, SessionIdentity
from travelcrm.core.errors import ResourceNotFoundError
from travelcrm.core.repository_protocols import (
    AdminStore, AuditTrail, ClientStore, InteractionStore,
)

logger = logging.getLogger(__name__)


class AuditedMutations:
    """Mutations on behalf of one acting identity."""

    def __init__(
        self,
        actor: SessionIdentity,
        clients: ClientStore,
        interactions: InteractionStore,
        admins: AdminStore,
        audit: AuditTrail,
    ):
        self.actor = actor
        self.clients = clients
        self.interactions = interactions
        self.admins = admins
        self.audit = audit

    async def _audit(
        self, entity_type: EntityType, entity_id: int,
        action: AuditAction, details: str,
    ) -> None:
        await self.audit.record(
            self.actor.id, entity_type.value, entity_id, action.value, details,
        )

    # ─── Clients ─────────────────────────────────────────────────

    async def create_client(self, data: dict):
        client = await self.clients.create(data, created_by=self.actor.id)
        await self._audit(
            EntityType.CLIENT, client.id, AuditAction.CREATE,
            describe_client(client, AuditAction.CREATE),
        )
        return client

    async def update_client(self, client_id: int, changes: dict):
        client = await self.clients.update(client_id, changes)
        await self._audit(
            EntityType.CLIENT, client_id, AuditAction.UPDATE,
            describe_client(client, AuditAction.UPDATE),
        )
        return client

    async def delete_client(self, client_id: int) -> None:
        client = await self.clients.get(client_id)
        if not await self.clients.delete(client_id):
            raise ResourceNotFoundError("Client", client_id)
        await self._audit(
            EntityType.CLIENT, client_id, AuditAction.DELETE,
            describe_client(client, AuditAction.DELETE),
        )

    # ─── Interactions ────────────────────────────────────────────

    async def create_interaction(self, client_id: int, data: dict):
        client = await self.clients.get(client_id)
        interaction = await self.interactions.create(
            client_id, data, created_by=self.actor.id,
        )
        await self._audit(
            EntityType.INTERACTION, interaction.id, AuditAction.CREATE,
            describe_interaction(interaction, AuditAction.CREATE, client),
        )
        return interaction

    async def update_interaction(self, interaction_id: int, changes: dict):
        # Rendered before update(): the re-read refreshes the same identity-map object
        details = describe_interaction(
            await self.interactions.get(interaction_id), AuditAction.UPDATE,
        )
        interaction = await self.interactions.update(interaction_id, changes)
        await self._audit(
            EntityType.INTERACTION, interaction_id, AuditAction.UPDATE, details,
        )
        return interaction

    async def delete_interaction(self, interaction_id: int) -> None:
        interaction = await self.interactions.get(interaction_id)
        if not await self.interactions.delete(interaction_id):
            raise ResourceNotFoundError("Interaction", interaction_id)
        await self._audit(
            EntityType.INTERACTION, interaction_id, AuditAction.DELETE,
            describe_interaction(interaction, AuditAction.DELETE),
        )

    # ─── Admins ──────────────────────────────────────────────────

    async def create_admin(self, data: dict):
        admin = await self.admins.create(data)
        await self._audit(
            EntityType.ADMIN, admin.id, AuditAction.CREATE,
            describe_admin(admin, AuditAction.CREATE),
        )
        return admin

    async def update_admin(self, admin_id: int, changes: dict):
        await self._guard_admin_change(admin_id, changes)
        admin = await self.admins.update(admin_id, changes)
        await self._audit(
            EntityType.ADMIN, admin_id, AuditAction.UPDATE,
            describe_admin(admin, AuditAction.UPDATE),
        )
        return admin

    async def deactivate_admin(self, admin_id: int):
        changes = {"active": False}
        await self._guard_admin_change(admin_id, changes)
        admin = await self.admins.update(admin_id, changes)
        await self._audit(
            EntityType.ADMIN, admin_id, AuditAction.DELETE,
            describe_admin(admin, AuditAction.DELETE),
        )
        return admin

    async def _guard_admin_change(self, admin_id: int, changes: dict) -> None:
        target = await self.admins.get(admin_id)
        removes_access = removes_admin_access(target.role, target.active, changes)
        others = (
            await self.admins.count_active_admins(exclude_id=admin_id)
            if removes_access else 1
        )
        check_admin_change(
            self.actor.id, admin_id, changes, removes_access, others,
        )
