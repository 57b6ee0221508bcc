"""Audit Log Routes — read-only views of the audit trail.

Invariants:
    - No write endpoint exists; rows are only appended by AuditedMutations
    - Per-client history is scoped to entity_type="client"
"""

from fastapi import APIRouter, Depends, Query

from travelcrm.config import get_settings
from travelcrm.core.domain_types import EntityType, SessionIdentity
from travelcrm.core.projections import public_audit_log
from travelcrm.services.audit_logger import AuditLogger
from travelcrm.services.client_repository import ClientRepository
from travelcrm.api.dependencies import (
    authenticated, get_audit_logger, get_client_repository, parse_id,
)

router = APIRouter(prefix="/api", tags=["audit-logs"])


@router.get("/audit-logs")
async def list_audit_logs(
    limit: int | None = Query(None, ge=1, le=1000),
    _: SessionIdentity = Depends(authenticated),
    audit: AuditLogger = Depends(get_audit_logger),
):
    rows = await audit.list_all(limit=limit or get_settings().audit_log_limit)
    return [public_audit_log(log) for log in rows]


@router.get("/clients/{client_id}/audit-logs")
async def list_client_audit_logs(
    client_id: str,
    _: SessionIdentity = Depends(authenticated),
    clients: ClientRepository = Depends(get_client_repository),
    audit: AuditLogger = Depends(get_audit_logger),
):
    client = await clients.get(parse_id(client_id, "client ID"))
    rows = await audit.list_by_entity(EntityType.CLIENT.value, client.id)
    return [public_audit_log(log) for log in rows]
