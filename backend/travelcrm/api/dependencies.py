"""Request Dependencies — per-request identity resolution and service wiring.

Invariants:
    - Identity is looked up from the session cookie on every request; nothing
      about the caller is kept in process-wide state
    - authenticated/admin_only run before the handler body, so a rejected
      request touches no repository
    - All services of one request share the request's AsyncSession (FastAPI
      caches get_db per request), except the audit logger, which gets its own
      so a failed audit write cannot expire the mutated rows being returned
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from travelcrm.config import get_settings
from travelcrm.core.access_control import require_admin, require_authenticated
from travelcrm.core.domain_types import SessionIdentity
from travelcrm.core.errors import InvalidIdentifierError
from travelcrm.infrastructure.database import get_db
from travelcrm.services.admin_repository import AdminRepository
from travelcrm.services.audit_logger import AuditLogger
from travelcrm.services.audited_mutations import AuditedMutations
from travelcrm.services.client_repository import ClientRepository
from travelcrm.services.credential_store import CredentialStore
from travelcrm.services.interaction_repository import InteractionRepository
from travelcrm.services.session_authenticator import SessionAuthenticator


def parse_id(raw: str, label: str = "ID") -> int:
    """Path ids are positive integers; anything else is a 400."""
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise InvalidIdentifierError(label)
    return int(raw)


# ─── Services ───────────────────────────────────────────────────

def get_credential_store(db: AsyncSession = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db, rounds=get_settings().bcrypt_rounds)


def get_session_authenticator(
    db: AsyncSession = Depends(get_db),
) -> SessionAuthenticator:
    return SessionAuthenticator(db, ttl=get_settings().session_ttl)


def get_client_repository(db: AsyncSession = Depends(get_db)) -> ClientRepository:
    return ClientRepository(db)


def get_interaction_repository(
    db: AsyncSession = Depends(get_db),
) -> InteractionRepository:
    return InteractionRepository(db)


def get_admin_repository(
    db: AsyncSession = Depends(get_db),
    credentials: CredentialStore = Depends(get_credential_store),
    sessions: SessionAuthenticator = Depends(get_session_authenticator),
) -> AdminRepository:
    return AdminRepository(db, credentials, sessions)


def get_audit_logger(
    db: AsyncSession = Depends(get_db, use_cache=False),
) -> AuditLogger:
    return AuditLogger(db)


# ─── Identity ───────────────────────────────────────────────────

async def get_identity(
    request: Request,
    sessions: SessionAuthenticator = Depends(get_session_authenticator),
) -> SessionIdentity | None:
    token = request.cookies.get(get_settings().session_cookie_name)
    return await sessions.resolve(token)


async def authenticated(
    identity: SessionIdentity | None = Depends(get_identity),
) -> SessionIdentity:
    return require_authenticated(identity)


async def admin_only(
    identity: SessionIdentity | None = Depends(get_identity),
) -> SessionIdentity:
    return require_admin(identity)


# ─── Mutations ──────────────────────────────────────────────────

def get_mutations(
    actor: SessionIdentity = Depends(authenticated),
    clients: ClientRepository = Depends(get_client_repository),
    interactions: InteractionRepository = Depends(get_interaction_repository),
    admins: AdminRepository = Depends(get_admin_repository),
    audit: AuditLogger = Depends(get_audit_logger),
) -> AuditedMutations:
    return AuditedMutations(actor, clients, interactions, admins, audit)


def get_admin_mutations(
    actor: SessionIdentity = Depends(admin_only),
    clients: ClientRepository = Depends(get_client_repository),
    interactions: InteractionRepository = Depends(get_interaction_repository),
    admins: AdminRepository = Depends(get_admin_repository),
    audit: AuditLogger = Depends(get_audit_logger),
) -> AuditedMutations:
    return AuditedMutations(actor, clients, interactions, admins, audit)
