"""Interaction Routes — interactions nested under a client and addressed directly.

Invariants:
    - Listing or creating under a missing client is a 404, not an empty list
    - An interaction's client is fixed at creation; updates cannot move it
"""

from fastapi import APIRouter, Depends, status

from travelcrm.core.domain_types import SessionIdentity
from travelcrm.core.projections import public_interaction
from travelcrm.schemas.interaction import InteractionCreate, InteractionUpdate
from travelcrm.services.audited_mutations import AuditedMutations
from travelcrm.services.client_repository import ClientRepository
from travelcrm.services.interaction_repository import InteractionRepository
from travelcrm.api.dependencies import (
    authenticated, get_client_repository, get_interaction_repository,
    get_mutations, parse_id,
)

router = APIRouter(prefix="/api", tags=["interactions"])


@router.get("/clients/{client_id}/interactions")
async def list_client_interactions(
    client_id: str,
    _: SessionIdentity = Depends(authenticated),
    clients: ClientRepository = Depends(get_client_repository),
    interactions: InteractionRepository = Depends(get_interaction_repository),
):
    client = await clients.get(parse_id(client_id, "client ID"))
    return [public_interaction(i) for i in await interactions.list_by_client(client.id)]


@router.post(
    "/clients/{client_id}/interactions", status_code=status.HTTP_201_CREATED,
)
async def create_interaction(
    client_id: str,
    body: InteractionCreate,
    mutations: AuditedMutations = Depends(get_mutations),
):
    interaction = await mutations.create_interaction(
        parse_id(client_id, "client ID"), body.model_dump(),
    )
    return public_interaction(interaction)


@router.get("/interactions/{interaction_id}")
async def get_interaction(
    interaction_id: str,
    _: SessionIdentity = Depends(authenticated),
    interactions: InteractionRepository = Depends(get_interaction_repository),
):
    return public_interaction(await interactions.get(parse_id(interaction_id)))


@router.put("/interactions/{interaction_id}")
async def update_interaction(
    interaction_id: str,
    body: InteractionUpdate,
    mutations: AuditedMutations = Depends(get_mutations),
):
    interaction = await mutations.update_interaction(
        parse_id(interaction_id), body.to_changes(),
    )
    return public_interaction(interaction)


@router.delete("/interactions/{interaction_id}")
async def delete_interaction(
    interaction_id: str,
    mutations: AuditedMutations = Depends(get_mutations),
):
    await mutations.delete_interaction(parse_id(interaction_id))
    return {"message": "Interaction deleted successfully"}
