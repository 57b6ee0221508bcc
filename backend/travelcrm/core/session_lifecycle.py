"""Session Lifecycle — pure state machine for server-side session records.

Invariants:
    - Anonymous -> Authenticated only through a freshly created record
    - A record past expires_at resolves to ANONYMOUS (never sliding)
    - A record with revoked_at set resolves to REVOKED, which callers treat as anonymous
    - Only the SHA-256 digest of a token is ever compared or stored

Design Decisions:
    - Fixed TTL from creation: expiry computed once, at login
    - Naive datetimes treated as UTC: SQLite drops tzinfo on round-trip
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from travelcrm.core.domain_types import SessionState

TOKEN_BYTES = 32


def new_session_token() -> str:
    """Opaque, unguessable token delivered to the client as a cookie."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_session_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_expiry(created_at: datetime, ttl: timedelta) -> datetime:
    return as_utc(created_at) + ttl


def is_expired(expires_at: datetime, now: datetime) -> bool:
    return as_utc(expires_at) <= as_utc(now)


def resolve_state(
    expires_at: datetime | None,
    revoked_at: datetime | None,
    now: datetime,
) -> SessionState:
    """Classify a looked-up record. expires_at None means no record was found."""
    if expires_at is None:
        return SessionState.ANONYMOUS
    if revoked_at is not None:
        return SessionState.REVOKED
    if is_expired(expires_at, now):
        return SessionState.ANONYMOUS
    return SessionState.AUTHENTICATED
