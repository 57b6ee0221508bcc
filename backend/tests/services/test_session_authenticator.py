"""Session Authenticator — verifies open/resolve/revoke/expiry against the store.

Invariants:
    - Only the token digest is persisted
    - Revoked and expired sessions resolve to None (anonymous)
    - purge_expired() drops dead rows and keeps live ones
"""

from datetime import timedelta

from sqlalchemy import func, select

from travelcrm.core.domain_types import Role
from travelcrm.core.session_lifecycle import hash_session_token
from travelcrm.models.auth_session import AuthSession
from travelcrm.services.session_authenticator import SessionAuthenticator

from account_factory import create_account


async def test_open_then_resolve_restores_identity(test_db):
    admin = await create_account(test_db, "alice", role="admin")
    sessions = SessionAuthenticator(test_db)

    token, record = await sessions.open(admin)
    identity = await sessions.resolve(token)

    assert record.token_hash == hash_session_token(token)
    assert record.token_hash != token
    assert identity.id == admin.id
    assert identity.username == "alice"
    assert identity.role == Role.ADMIN


async def test_unknown_or_missing_token_is_anonymous(test_db):
    sessions = SessionAuthenticator(test_db)
    assert await sessions.resolve(None) is None
    assert await sessions.resolve("") is None
    assert await sessions.resolve("forged-token") is None


async def test_revoked_token_is_anonymous(test_db):
    admin = await create_account(test_db, "alice")
    sessions = SessionAuthenticator(test_db)
    token, _ = await sessions.open(admin)

    assert await sessions.revoke(token) is True
    assert await sessions.resolve(token) is None
    assert await sessions.revoke(token) is False


async def test_expired_session_is_anonymous(test_db):
    admin = await create_account(test_db, "alice")
    sessions = SessionAuthenticator(test_db, ttl=timedelta(seconds=-1))
    token, _ = await sessions.open(admin)

    assert await sessions.resolve(token) is None


async def test_revoke_all_for_admin_ends_every_session(test_db):
    admin = await create_account(test_db, "alice")
    other = await create_account(test_db, "bob")
    sessions = SessionAuthenticator(test_db)
    first, _ = await sessions.open(admin)
    second, _ = await sessions.open(admin)
    bobs, _ = await sessions.open(other)

    assert await sessions.revoke_all_for_admin(admin.id) == 2

    assert await sessions.resolve(first) is None
    assert await sessions.resolve(second) is None
    assert (await sessions.resolve(bobs)).username == "bob"


async def test_purge_expired_keeps_live_sessions(test_db):
    admin = await create_account(test_db, "alice")
    live = SessionAuthenticator(test_db)
    dead = SessionAuthenticator(test_db, ttl=timedelta(seconds=-1))
    keep, _ = await live.open(admin)
    await dead.open(admin)
    revoked, _ = await live.open(admin)
    await live.revoke(revoked)

    assert await live.purge_expired() == 2

    remaining = await test_db.scalar(select(func.count()).select_from(AuthSession))
    assert remaining == 1
    assert await live.resolve(keep) is not None
