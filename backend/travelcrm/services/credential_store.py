"""Credential Store — admin password hashing and credential verification.

Invariants:
    - Passwords are stored only as bcrypt hashes (salted, cost >= 4)
    - verify() fails with InvalidCredentialsError for unknown username, inactive
      account or wrong password — the three causes are indistinguishable
    - Unknown usernames still pay one bcrypt comparison (no timing oracle)
    - record_login() is best-effort and never changes the auth decision

Design Decisions:
    - bcrypt runs in a worker thread: a slow hash must not stall the event loop
"""

import asyncio
import logging
from datetime import datetime, timezone
from functools import lru_cache

import bcrypt
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from travelcrm.core.errors import InvalidCredentialsError
from travelcrm.models.admin import Admin

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10


def hash_password(plain_password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    if not isinstance(plain_password, str) or len(plain_password) == 0:
        raise ValueError("Password must be a non-empty string")
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), password_hash.encode("utf-8"),
        )
    except ValueError:
        # malformed stored hash or over-long input
        return False


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password("timing-equalizer", rounds)


class CredentialStore:
    """Looks up admins by username and checks their secrets."""

    def __init__(self, db: AsyncSession, rounds: int = DEFAULT_ROUNDS):
        self.db = db
        self.rounds = rounds

    async def hash(self, plain_password: str) -> str:
        return await asyncio.to_thread(hash_password, plain_password, self.rounds)

    async def verify(self, username: str, plain_password: str) -> Admin:
        result = await self.db.execute(
            select(Admin).where(Admin.username == username),
        )
        admin = result.scalar_one_or_none()
        if admin is None:
            dummy = await asyncio.to_thread(_dummy_hash, self.rounds)
            await asyncio.to_thread(verify_password, plain_password, dummy)
            raise InvalidCredentialsError()

        matches = await asyncio.to_thread(
            verify_password, plain_password, admin.password_hash,
        )
        if not matches or not admin.active:
            raise InvalidCredentialsError()
        return admin

    async def record_login(self, admin_id: int) -> None:
        try:
            await self.db.execute(
                update(Admin)
                .where(Admin.id == admin_id)
                .values(last_login=datetime.now(timezone.utc)),
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(
                f"Failed to record last login: {e}", extra={"admin_id": admin_id},
            )
