"""Boundary Protocols — contracts between the audited mutation layer and storage.

Invariants:
    - Mutating methods commit before returning; a returned value means durable
    - get()/update() raise ResourceNotFoundError; delete() returns False instead
    - Implementations provided by services/ via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
"""

from typing import Any, Protocol, Sequence


class ClientStore(Protocol):
    async def get(self, client_id: int) -> Any: ...
    async def list_recent(self, limit: int = 100, offset: int = 0) -> Sequence[Any]: ...
    async def search(self, query: str) -> Sequence[Any]: ...
    async def create(self, data: dict, created_by: int | None) -> Any: ...
    async def update(self, client_id: int, changes: dict) -> Any: ...
    async def delete(self, client_id: int) -> bool: ...


class InteractionStore(Protocol):
    async def get(self, interaction_id: int) -> Any: ...
    async def list_by_client(self, client_id: int) -> Sequence[Any]: ...
    async def create(
        self, client_id: int, data: dict, created_by: int | None,
    ) -> Any: ...
    async def update(self, interaction_id: int, changes: dict) -> Any: ...
    async def delete(self, interaction_id: int) -> bool: ...


class AdminStore(Protocol):
    async def get(self, admin_id: int) -> Any: ...
    async def list_all(self) -> Sequence[Any]: ...
    async def count(self) -> int: ...
    async def count_active_admins(self, exclude_id: int | None = None) -> int: ...
    async def create(self, data: dict) -> Any: ...
    async def update(self, admin_id: int, changes: dict) -> Any: ...


class AuditTrail(Protocol):
    async def record(
        self,
        admin_id: int | None,
        entity_type: str,
        entity_id: int,
        action: str,
        details: str,
    ) -> Any: ...
