"""Audited Mutations — verifies the persist-then-audit pairing.

Invariants:
    - Exactly one audit row per successful create/update/delete, with matching
      entity_type, entity_id and action
    - A failed mutation writes no audit row
    - An audit write failure leaves the committed mutation in place
    - Admin lock-out guards and session revocation on deactivation
"""

import logging

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from travelcrm.core.domain_types import AdminId, Role, SessionIdentity
from travelcrm.core.errors import AdminDeactivationRefused, ResourceNotFoundError
from travelcrm.core.session_lifecycle import as_utc
from travelcrm.models.audit_log import AuditLog
from travelcrm.services.audit_logger import AuditLogger
from travelcrm.services.audited_mutations import AuditedMutations
from travelcrm.services.client_repository import ClientRepository
from travelcrm.services.interaction_repository import InteractionRepository
from travelcrm.services.session_authenticator import SessionAuthenticator

from account_factory import build_admin_repository, create_account

CLIENT = {
    "first_name": "John", "last_name": "Smith",
    "email": "jsmith@x.com", "phone": "555-0100",
}


def build_mutations(db, actor, audit=None) -> AuditedMutations:
    identity = SessionIdentity(
        id=AdminId(actor.id), username=actor.username, role=Role(actor.role),
    )
    return AuditedMutations(
        identity,
        ClientRepository(db),
        InteractionRepository(db),
        build_admin_repository(db),
        audit or AuditLogger(db),
    )


async def audit_rows(db) -> list[AuditLog]:
    result = await db.execute(select(AuditLog).order_by(AuditLog.id))
    return list(result.scalars().all())


@pytest.fixture
async def actor(test_db):
    return await create_account(test_db, "admin", "admin123", role="admin")


async def test_client_lifecycle_writes_one_row_per_mutation(test_db, actor):
    mutations = build_mutations(test_db, actor)

    client = await mutations.create_client(dict(CLIENT))
    await mutations.update_client(client.id, {"email": "x@y.com"})
    await mutations.delete_client(client.id)

    rows = await audit_rows(test_db)
    assert [(r.entity_type, r.entity_id, r.action) for r in rows] == [
        ("client", client.id, "create"),
        ("client", client.id, "update"),
        ("client", client.id, "delete"),
    ]
    assert {r.admin_id for r in rows} == {actor.id}
    assert rows[0].details == "Client John Smith created"


async def test_created_by_is_the_acting_admin(test_db, actor):
    client = await build_mutations(test_db, actor).create_client(dict(CLIENT))
    assert client.created_by == actor.id


async def test_interaction_mutations_are_audited(test_db, actor):
    mutations = build_mutations(test_db, actor)
    client = await mutations.create_client(dict(CLIENT))

    interaction = await mutations.create_interaction(
        client.id, {"type": "call", "title": "Intro", "description": ""},
    )
    await mutations.update_interaction(interaction.id, {"title": "Intro call"})
    await mutations.delete_interaction(interaction.id)

    rows = [r for r in await audit_rows(test_db) if r.entity_type == "interaction"]
    assert [(r.entity_id, r.action) for r in rows] == [
        (interaction.id, "create"),
        (interaction.id, "update"),
        (interaction.id, "delete"),
    ]
    assert rows[0].details == "Interaction created for client John Smith"
    assert rows[1].details == "Interaction Intro updated"
    assert rows[2].details == "Interaction Intro call deleted"


async def test_audit_row_timestamped_after_mutation(test_db, actor):
    client = await build_mutations(test_db, actor).create_client(dict(CLIENT))
    (row,) = await audit_rows(test_db)
    await test_db.refresh(client)
    assert as_utc(row.created_at) >= as_utc(client.updated_at)


async def test_failed_mutation_writes_no_audit_row(test_db, actor):
    mutations = build_mutations(test_db, actor)

    with pytest.raises(ResourceNotFoundError):
        await mutations.update_client(404, {"email": "x@y.com"})
    with pytest.raises(ResourceNotFoundError):
        await mutations.delete_interaction(404)
    with pytest.raises(ResourceNotFoundError):
        await mutations.create_interaction(
            404, {"type": "call", "title": "Intro", "description": ""},
        )

    assert await audit_rows(test_db) == []


async def test_audit_failure_keeps_committed_mutation(
    test_db, test_session_factory, actor, monkeypatch, caplog,
):
    async with test_session_factory() as audit_db:
        async def broken_commit():
            raise OperationalError("INSERT INTO audit_logs", {}, Exception("disk I/O error"))

        monkeypatch.setattr(audit_db, "commit", broken_commit)
        mutations = build_mutations(test_db, actor, audit=AuditLogger(audit_db))

        with caplog.at_level(logging.ERROR):
            client = await mutations.create_client(dict(CLIENT))

    assert (await ClientRepository(test_db).get(client.id)).email == "jsmith@x.com"
    assert await audit_rows(test_db) == []
    assert "Audit write failed" in caplog.text


async def test_admin_mutations_are_audited_with_password_hashed(test_db, actor):
    mutations = build_mutations(test_db, actor)

    created = await mutations.create_admin({
        "username": "agent", "password": "agent123", "full_name": "Agent",
        "email": "agent@x.com", "role": "user", "active": True,
    })
    await mutations.update_admin(created.id, {"password": "changed1"})
    await mutations.deactivate_admin(created.id)

    rows = [r for r in await audit_rows(test_db) if r.entity_type == "admin"]
    assert [(r.entity_id, r.action) for r in rows] == [
        (created.id, "create"), (created.id, "update"), (created.id, "delete"),
    ]
    assert rows[2].details == "Admin agent deactivated"
    refreshed = await build_admin_repository(test_db).get(created.id)
    assert refreshed.active is False
    assert refreshed.password_hash not in ("agent123", "changed1")


async def test_self_deactivation_refused(test_db, actor):
    with pytest.raises(AdminDeactivationRefused):
        await build_mutations(test_db, actor).deactivate_admin(actor.id)
    assert await audit_rows(test_db) == []


async def test_last_active_admin_cannot_be_demoted(test_db, actor):
    with pytest.raises(AdminDeactivationRefused, match="At least one active admin"):
        await build_mutations(test_db, actor).update_admin(actor.id, {"role": "user"})


async def test_deactivation_revokes_sessions(test_db, actor):
    target = await create_account(test_db, "second", role="admin")
    sessions = SessionAuthenticator(test_db)
    token, _ = await sessions.open(target)

    await build_mutations(test_db, actor).deactivate_admin(target.id)

    assert await sessions.resolve(token) is None
    count = await test_db.scalar(select(func.count()).select_from(AuditLog))
    assert count == 1
