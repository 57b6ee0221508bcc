"""Interaction Repository — interactions recorded against clients.

Invariants:
    - create() requires the referenced client to exist at creation time
    - list_by_client() orders by interaction date, newest first (ties by id)
    - update() is a row-level UPDATE touching only sent columns plus updated_at
"""

from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travelcrm.core.errors import ResourceNotFoundError
from travelcrm.models.client import Client
from travelcrm.models.interaction import Interaction


class InteractionRepository:
    """Persistence for Interaction rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, interaction_id: int) -> Interaction:
        result = await self.db.execute(
            select(Interaction)
            .where(Interaction.id == interaction_id)
            .execution_options(populate_existing=True),
        )
        interaction = result.scalar_one_or_none()
        if interaction is None:
            raise ResourceNotFoundError("Interaction", interaction_id)
        return interaction

    async def list_by_client(self, client_id: int) -> list[Interaction]:
        result = await self.db.execute(
            select(Interaction)
            .where(Interaction.client_id == client_id)
            .order_by(Interaction.date.desc(), Interaction.id.desc()),
        )
        return list(result.scalars().all())

    async def create(
        self, client_id: int, data: dict, created_by: int | None,
    ) -> Interaction:
        exists = await self.db.scalar(
            select(Client.id).where(Client.id == client_id),
        )
        if exists is None:
            raise ResourceNotFoundError("Client", client_id)

        now = datetime.now(timezone.utc)
        fields = dict(data)
        if fields.get("date") is None:
            fields["date"] = now
        interaction = Interaction(
            **fields, client_id=client_id, created_by=created_by,
            created_at=now, updated_at=now,
        )
        self.db.add(interaction)
        try:
            await self.db.commit()
        except IntegrityError:
            # client removed between the existence check and the insert
            await self.db.rollback()
            raise ResourceNotFoundError("Client", client_id)
        await self.db.refresh(interaction)
        return interaction

    async def update(self, interaction_id: int, changes: dict) -> Interaction:
        result = await self.db.execute(
            update(Interaction)
            .where(Interaction.id == interaction_id)
            .values(**changes, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("Interaction", interaction_id)
        await self.db.commit()
        return await self.get(interaction_id)

    async def delete(self, interaction_id: int) -> bool:
        result = await self.db.execute(
            delete(Interaction).where(Interaction.id == interaction_id),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            return False
        await self.db.commit()
        return True
