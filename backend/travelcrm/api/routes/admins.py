"""Admin Routes — administrator account management (admin role only).

Invariants:
    - Every route depends on admin_only: 401 without a session, 403 for role=user
    - Responses go through public_admin; no password material leaves the process
    - DELETE deactivates; admin rows are never removed
"""

from fastapi import APIRouter, Depends, status

from travelcrm.core.domain_types import SessionIdentity
from travelcrm.core.projections import public_admin
from travelcrm.schemas.admin import AdminCreate, AdminUpdate
from travelcrm.services.admin_repository import AdminRepository
from travelcrm.services.audited_mutations import AuditedMutations
from travelcrm.api.dependencies import (
    admin_only, get_admin_mutations, get_admin_repository, parse_id,
)

router = APIRouter(prefix="/api/admins", tags=["admins"])


@router.get("")
async def list_admins(
    _: SessionIdentity = Depends(admin_only),
    admins: AdminRepository = Depends(get_admin_repository),
):
    return [public_admin(a) for a in await admins.list_all()]


@router.get("/{admin_id}")
async def get_admin(
    admin_id: str,
    _: SessionIdentity = Depends(admin_only),
    admins: AdminRepository = Depends(get_admin_repository),
):
    return public_admin(await admins.get(parse_id(admin_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_admin(
    body: AdminCreate,
    mutations: AuditedMutations = Depends(get_admin_mutations),
):
    return public_admin(await mutations.create_admin(body.model_dump()))


@router.put("/{admin_id}")
async def update_admin(
    admin_id: str,
    body: AdminUpdate,
    mutations: AuditedMutations = Depends(get_admin_mutations),
):
    admin = await mutations.update_admin(parse_id(admin_id), body.to_changes())
    return public_admin(admin)


@router.delete("/{admin_id}")
async def deactivate_admin(
    admin_id: str,
    mutations: AuditedMutations = Depends(get_admin_mutations),
):
    await mutations.deactivate_admin(parse_id(admin_id))
    return {"message": "Admin deactivated successfully"}
