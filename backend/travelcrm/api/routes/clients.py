"""Client Routes — client records (any authenticated role).

Invariants:
    - ?q= switches listing to search; a blank q lists as if absent
    - created_by is stamped from the session, never read from the body
    - DELETE removes the client's interactions in the same transaction
"""

from fastapi import APIRouter, Depends, Query, status

from travelcrm.config import get_settings
from travelcrm.core.domain_types import SessionIdentity
from travelcrm.core.projections import public_client
from travelcrm.schemas.client import ClientCreate, ClientUpdate
from travelcrm.services.audited_mutations import AuditedMutations
from travelcrm.services.client_repository import ClientRepository
from travelcrm.api.dependencies import (
    authenticated, get_client_repository, get_mutations, parse_id,
)

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("")
async def list_clients(
    q: str | None = Query(None),
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    _: SessionIdentity = Depends(authenticated),
    clients: ClientRepository = Depends(get_client_repository),
):
    if q and q.strip():
        rows = await clients.search(q.strip())
    else:
        rows = await clients.list_recent(
            limit=limit or get_settings().client_list_limit, offset=offset,
        )
    return [public_client(c) for c in rows]


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    _: SessionIdentity = Depends(authenticated),
    clients: ClientRepository = Depends(get_client_repository),
):
    return public_client(await clients.get(parse_id(client_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_client(
    body: ClientCreate,
    mutations: AuditedMutations = Depends(get_mutations),
):
    return public_client(await mutations.create_client(body.model_dump()))


@router.put("/{client_id}")
async def update_client(
    client_id: str,
    body: ClientUpdate,
    mutations: AuditedMutations = Depends(get_mutations),
):
    client = await mutations.update_client(parse_id(client_id), body.to_changes())
    return public_client(client)


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    mutations: AuditedMutations = Depends(get_mutations),
):
    await mutations.delete_client(parse_id(client_id))
    return {"message": "Client deleted successfully"}
