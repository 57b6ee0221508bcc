"""Client Repository — CRUD and search over clients.

Invariants:
    - list_recent() orders most-recently-updated first (ties broken by id), default 100 rows
    - search() is a case-insensitive substring match on "first last", email and
      phone, ORed; results ordered by id so identical input gives identical output
    - update() is a single row-level UPDATE: only the sent columns plus updated_at
      change, so concurrent disjoint updates both survive (no read-modify-write)
    - delete() removes the client and all of its interactions in one transaction

Design Decisions:
    - Interactions deleted explicitly before the client even though the FK has
      ON DELETE CASCADE: SQLite ignores FK actions unless PRAGMA foreign_keys is on
    - autoescape on LIKE: "%" and "_" in a query match literally
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travelcrm.core.errors import ResourceNotFoundError
from travelcrm.models.client import Client
from travelcrm.models.interaction import Interaction

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


class ClientRepository:
    """Persistence for Client rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, client_id: int) -> Client:
        result = await self.db.execute(
            select(Client)
            .where(Client.id == client_id)
            .execution_options(populate_existing=True),
        )
        client = result.scalar_one_or_none()
        if client is None:
            raise ResourceNotFoundError("Client", client_id)
        return client

    async def list_recent(
        self, limit: int = DEFAULT_LIST_LIMIT, offset: int = 0,
    ) -> list[Client]:
        result = await self.db.execute(
            select(Client)
            .order_by(Client.updated_at.desc(), Client.id.desc())
            .limit(limit)
            .offset(offset),
        )
        return list(result.scalars().all())

    async def search(self, query: str) -> list[Client]:
        full_name = Client.first_name + " " + Client.last_name
        result = await self.db.execute(
            select(Client)
            .where(
                or_(
                    full_name.icontains(query, autoescape=True),
                    Client.email.icontains(query, autoescape=True),
                    Client.phone.icontains(query, autoescape=True),
                ),
            )
            .order_by(Client.id),
        )
        return list(result.scalars().all())

    async def create(self, data: dict, created_by: int | None) -> Client:
        now = datetime.now(timezone.utc)
        client = Client(
            **data, created_by=created_by, created_at=now, updated_at=now,
        )
        self.db.add(client)
        await self.db.commit()
        await self.db.refresh(client)
        return client

    async def update(self, client_id: int, changes: dict) -> Client:
        result = await self.db.execute(
            update(Client)
            .where(Client.id == client_id)
            .values(**changes, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("Client", client_id)
        await self.db.commit()
        return await self.get(client_id)

    async def delete(self, client_id: int) -> bool:
        removed = await self.db.execute(
            delete(Interaction).where(Interaction.client_id == client_id),
        )
        result = await self.db.execute(
            delete(Client).where(Client.id == client_id),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            return False
        await self.db.commit()
        logger.info(
            f"Client deleted with {removed.rowcount} interaction(s)",
            extra={"entity_type": "client", "entity_id": client_id},
        )
        return True
