"""Authentication Routes — login, logout and current-user lookup.

Invariants:
    - Login failures for unknown, inactive or wrong-password accounts share one
      401 message
    - The session token only ever travels in an HTTP-only cookie
    - Logout revokes the server-side record, so a replayed cookie is anonymous
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from travelcrm.config import get_settings
from travelcrm.core.domain_types import Role, SessionIdentity
from travelcrm.core.errors import UnauthorizedError
from travelcrm.core.projections import public_identity
from travelcrm.schemas.auth import LoginRequest
from travelcrm.services.credential_store import CredentialStore
from travelcrm.services.session_authenticator import SessionAuthenticator
from travelcrm.api.dependencies import (
    get_credential_store, get_identity, get_session_authenticator,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    credentials: CredentialStore = Depends(get_credential_store),
    sessions: SessionAuthenticator = Depends(get_session_authenticator),
):
    admin = await credentials.verify(body.username, body.password)
    identity = SessionIdentity(
        id=admin.id, username=admin.username, role=Role(admin.role),
    )
    token, _ = await sessions.open(admin)
    await credentials.record_login(identity.id)

    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=int(settings.session_ttl.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )
    logger.info("Login succeeded", extra={"admin_id": identity.id})
    return {"user": public_identity(identity)}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    sessions: SessionAuthenticator = Depends(get_session_authenticator),
):
    settings = get_settings()
    await sessions.revoke(request.cookies.get(settings.session_cookie_name))
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )
    return {"message": "Logged out successfully"}


@router.get("/user")
async def current_user(identity: SessionIdentity | None = Depends(get_identity)):
    if identity is None:
        raise UnauthorizedError("Not authenticated")
    return {"user": public_identity(identity)}
