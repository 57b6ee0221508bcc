"""Session Authenticator — server-side sessions behind an opaque cookie token.

Invariants:
    - open() persists {token_hash, admin_id, username, role, expires_at} before
      the token is handed to the caller
    - resolve() returns a SessionIdentity only for AUTHENTICATED records;
      missing, expired and revoked records all yield None (anonymous)
    - revoke() takes effect immediately: the next resolve() with that token is anonymous
    - The identity carries {id, username, role} only

Design Decisions:
    - Explicit lookup per request, injected via FastAPI dependencies — no
      process-wide identity state
    - Revocation marks the row instead of deleting it; purge_expired() removes
      dead rows at startup
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from travelcrm.core.domain_types import AdminId, Role, SessionIdentity, SessionState
from travelcrm.core.session_lifecycle import (
    compute_expiry, hash_session_token, new_session_token, resolve_state,
)
from travelcrm.models.admin import Admin
from travelcrm.models.auth_session import AuthSession

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)


class SessionAuthenticator:
    """Creates, resolves and revokes server-side sessions."""

    def __init__(self, db: AsyncSession, ttl: timedelta = DEFAULT_TTL):
        self.db = db
        self.ttl = ttl

    async def open(self, admin: Admin) -> tuple[str, AuthSession]:
        """Anonymous -> Authenticated. Returns the raw token for the cookie."""
        token = new_session_token()
        now = datetime.now(timezone.utc)
        record = AuthSession(
            token_hash=hash_session_token(token),
            admin_id=admin.id,
            username=admin.username,
            role=admin.role,
            created_at=now,
            expires_at=compute_expiry(now, self.ttl),
        )
        self.db.add(record)
        await self.db.commit()
        logger.info("Session opened", extra={"admin_id": admin.id})
        return token, record

    async def resolve(self, token: str | None) -> SessionIdentity | None:
        if not token:
            return None
        record = await self.db.get(
            AuthSession, hash_session_token(token), populate_existing=True,
        )
        state = resolve_state(
            record.expires_at if record else None,
            record.revoked_at if record else None,
            datetime.now(timezone.utc),
        )
        if state != SessionState.AUTHENTICATED:
            return None
        return SessionIdentity(
            id=AdminId(record.admin_id),
            username=record.username,
            role=Role(record.role),
        )

    async def revoke(self, token: str | None) -> bool:
        """Authenticated -> Revoked. False when the token matched no live session."""
        if not token:
            return False
        result = await self.db.execute(
            update(AuthSession)
            .where(AuthSession.token_hash == hash_session_token(token))
            .where(AuthSession.revoked_at.is_(None))
            .values(revoked_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount > 0

    async def revoke_all_for_admin(self, admin_id: int, commit: bool = True) -> int:
        result = await self.db.execute(
            update(AuthSession)
            .where(AuthSession.admin_id == admin_id)
            .where(AuthSession.revoked_at.is_(None))
            .values(revoked_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        if commit:
            await self.db.commit()
        if result.rowcount:
            logger.info(
                f"Revoked {result.rowcount} session(s)", extra={"admin_id": admin_id},
            )
        return result.rowcount

    async def purge_expired(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        result = await self.db.execute(
            delete(AuthSession).where(
                or_(
                    AuthSession.expires_at <= now,
                    AuthSession.revoked_at.is_not(None),
                ),
            ).execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount

